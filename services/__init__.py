"""Session lifecycle for cookie-based authentication."""
