"""Infrastructure package: SQLite stores, cache implementations, serialization."""
