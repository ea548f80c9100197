"""Application services: grid building, the roster board and gateways."""
