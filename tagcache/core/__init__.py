"""Core package: application context, fetch scheduling, artifact access, maintenance."""
