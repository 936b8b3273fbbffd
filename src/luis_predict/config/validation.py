"""Configuration validation for the LUIS batch tester."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from ..prediction import InvalidArgumentError, PublishSlot
from .exceptions import ConfigError, ConfigValidationError, DirectoryValidationError
from .settings import Settings


class ConfigValidator:
    """Validates configuration settings for the LUIS batch tester."""

    @staticmethod
    def validate_required() -> None:
        """Validate that every required setting is present.

        Raises:
            ConfigValidationError: If any required configuration is missing.
        """
        missing_configs = [
            key for key, value in Settings.get_required_configs().items() if not value
        ]
        if missing_configs:
            raise ConfigValidationError(
                f'Missing required configuration: {", ".join(missing_configs)}. '
                'Please set these in your environment variables or .env file.',
                missing_keys=missing_configs,
            )
        logging.info('Required configuration present')

    @staticmethod
    def validate_values() -> None:
        """Validate the format of the app id, publish slot and poll interval.

        Raises:
            ConfigValidationError: If a value cannot be used.
        """
        try:
            uuid.UUID(str(Settings.LUIS_APP_ID))
        except ValueError as e:
            raise ConfigValidationError(
                f'LUIS_APP_ID must be a UUID, got {Settings.LUIS_APP_ID!r}',
                config_key='LUIS_APP_ID',
            ) from e

        try:
            PublishSlot.parse(Settings.LUIS_MODEL_SLOT)
        except InvalidArgumentError as e:
            raise ConfigValidationError(
                f'Invalid LUIS_MODEL_SLOT: {e}', config_key='LUIS_MODEL_SLOT'
            ) from e

        try:
            poll_interval = Settings.poll_interval()
        except ConfigError as e:
            raise ConfigValidationError(str(e), config_key=e.config_key) from e
        if poll_interval <= 0:
            raise ConfigValidationError(
                f'LUIS_POLL_INTERVAL must be > 0, got {poll_interval}',
                config_key='LUIS_POLL_INTERVAL',
            )

    @staticmethod
    def validate_input_folder(input_folder: str | Path) -> None:
        """Validate that the input folder exists and is a directory.

        Args:
            input_folder: Folder containing the files to test.

        Raises:
            DirectoryValidationError: If the folder is missing or not a directory.
        """
        folder = Path(input_folder)
        if not folder.exists():
            raise DirectoryValidationError(
                f'Input folder does not exist: {folder}',
                directory_path=str(folder),
            )
        if not folder.is_dir():
            raise DirectoryValidationError(
                f'Input path is not a directory: {folder}',
                directory_path=str(folder),
            )

    @staticmethod
    def validate_all(input_folder: str | Path | None = None, *, require_input: bool = True) -> None:
        """Perform comprehensive validation of all configuration.

        Args:
            input_folder: Folder to validate instead of Settings.TEST_FILES_FOLDER.
            require_input: Whether the input folder must be validated.

        Raises:
            ConfigError: If any validation fails.
        """
        try:
            ConfigValidator.validate_required()
            ConfigValidator.validate_values()
            if require_input:
                ConfigValidator.validate_input_folder(input_folder or Settings.TEST_FILES_FOLDER)

            logging.info('Comprehensive configuration validation completed successfully')

        except ConfigError as e:
            logging.error('Configuration validation failed: %s', e)
            raise

    @staticmethod
    def is_valid(input_folder: str | Path | None = None, *, require_input: bool = True) -> bool:
        """Check if configuration is valid without raising exceptions.

        Returns:
            True if configuration is valid, False otherwise.
        """
        try:
            ConfigValidator.validate_all(input_folder, require_input=require_input)
            return True
        except ConfigError:
            return False
