"""Public contact form and the admin inbox."""
