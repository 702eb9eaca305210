"""
Configuration Exceptions.

Raised while reading or validating vault configuration files, before any
vault exists. Kept apart from VaultError so callers can tell a bad file from
a rejected vault operation.
"""

from typing import Optional


class ConfigError(Exception):
    """Configuration could not be loaded."""


class ConfigFileNotFoundError(ConfigError):
    """The named configuration file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class ConfigParseError(ConfigError):
    """A configuration file is not a YAML mapping."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


class ConfigValidationError(ConfigError):
    """
    The merged configuration failed model validation.

    Attributes:
        errors: One "location: message" string per failed field
        path: Base file the configuration was loaded from, if known
    """

    def __init__(self, errors: list[str], path: Optional[str] = None):
        self.errors = errors
        self.path = path
        source = f" ({path})" if path else ""
        lines = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Invalid vault configuration{source}:\n{lines}")
