"""SQLite data access used by the bundled persistence gateway."""
