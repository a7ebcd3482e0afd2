"""User management (admin panel accounts)."""
