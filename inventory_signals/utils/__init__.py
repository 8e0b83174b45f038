"""Logging setup and local-time helpers."""
