"""Admin dashboard."""
