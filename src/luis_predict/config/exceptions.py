"""Errors raised while loading or checking the batch tester settings.

Every error names the environment variable at fault in ``config_key`` so the
command line can point the user at the setting to fix.
"""

from __future__ import annotations


class ConfigError(Exception):
    """A LUIS setting is missing, unparsable or out of range."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        """Initialize ConfigError.

        Args:
            message: Error message.
            config_key: Environment variable the error is about, e.g. 'LUIS_APP_ID'.
        """
        super().__init__(message)
        self.config_key = config_key


class ConfigValidationError(ConfigError):
    """Required endpoint, key or model settings are absent or malformed."""

    def __init__(
        self,
        message: str,
        missing_keys: list[str] | None = None,
        *,
        config_key: str | None = None,
    ) -> None:
        """Initialize ConfigValidationError.

        Args:
            message: Error message.
            missing_keys: Every required variable found empty, reported together.
            config_key: Variable holding a malformed value, when only one is at fault.
        """
        super().__init__(message, config_key)
        self.missing_keys = missing_keys or []


class DirectoryValidationError(ConfigError):
    """The folder of documents to test cannot be used."""

    def __init__(
        self,
        message: str,
        directory_path: str,
        config_key: str | None = 'TEST_FILES_FOLDER',
    ) -> None:
        """Initialize DirectoryValidationError.

        Args:
            message: Error message.
            directory_path: Input folder as given on the command line or in the environment.
            config_key: Variable the folder defaults from.
        """
        super().__init__(message, config_key)
        self.directory_path = directory_path
