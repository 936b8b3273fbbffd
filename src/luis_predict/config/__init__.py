"""Configuration management for the LUIS batch tester.

This package provides configuration loading from environment variables and
``.env`` files, with validation and error handling.
"""

from .exceptions import ConfigError, ConfigValidationError, DirectoryValidationError
from .settings import Settings
from .validation import ConfigValidator

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DirectoryValidationError",
    "Settings",
    "ConfigValidator",
]
