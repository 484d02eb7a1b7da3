"""Exceptions raised while loading or validating mediafs configuration."""


class ConfigError(Exception):
    """Raised when a config file, environment override, or CLI value is invalid."""
