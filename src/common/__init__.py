"""Shared helpers: HTTP transfers and logging utilities."""
