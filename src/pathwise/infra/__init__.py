"""Database infrastructure and repositories."""
