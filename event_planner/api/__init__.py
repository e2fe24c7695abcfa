"""Authentication helpers for the HTTP service."""
