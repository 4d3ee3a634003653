"""Shared infrastructure: configuration, constants, exception taxonomy."""
