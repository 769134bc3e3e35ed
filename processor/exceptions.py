"""Exceptions shared by the calendar modules."""


class ConfigurationError(Exception):
    """Invalid request options or environment settings."""
