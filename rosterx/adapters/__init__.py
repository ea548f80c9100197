"""Adapters to files and remote systems."""
