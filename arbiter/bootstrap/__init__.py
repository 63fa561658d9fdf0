"""Process-level wiring: database sessions and logging."""
