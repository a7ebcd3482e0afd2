"""Login and the bearer-token gate for protected routes."""
