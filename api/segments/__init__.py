"""Read-only segment taxonomy."""
