"""Shared infrastructure: logging and configuration."""
