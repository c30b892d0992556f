"""Shared infrastructure: logging setup and error types."""
