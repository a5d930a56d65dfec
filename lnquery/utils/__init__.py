"""Shared utilities: settings, structured logging, sanitization, formatting."""
