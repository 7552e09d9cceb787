"""Utility package: logging, events, application paths."""
