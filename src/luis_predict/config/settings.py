"""Configuration settings for the LUIS document prediction batch tester.

This module provides configuration management with environment variables
loading from the process environment or a ``.env`` file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigError

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Configuration settings for the LUIS batch tester.

    Attributes:
        LUIS_ENDPOINT_BASE_URI: Base URI of the LUIS endpoint.
        LUIS_PREDICTION_KEY: Prediction (subscription) key for the endpoint.
        LUIS_APP_ID: App ID of the application with the published model.
        LUIS_MODEL_SLOT: Publish slot to query, 'staging' or 'production'.
        LUIS_POLL_INTERVAL: Seconds between operation status checks.
        TEST_FILES_FOLDER: Folder containing the files to test.
        OUTPUT_FOLDER: Folder for output files, defaults to '<TEST_FILES_FOLDER>/output'.
        OUTPUT_STATS_FILE: Optional JSON file receiving run statistics.
    """

    # API Configuration
    LUIS_ENDPOINT_BASE_URI: str | None = os.getenv('LUIS_ENDPOINT_BASE_URI')
    LUIS_PREDICTION_KEY: str | None = os.getenv('LUIS_PREDICTION_KEY')

    # Model Configuration
    LUIS_APP_ID: str | None = os.getenv('LUIS_APP_ID')
    LUIS_MODEL_SLOT: str = os.getenv('LUIS_MODEL_SLOT', 'production')
    LUIS_POLL_INTERVAL: str = os.getenv('LUIS_POLL_INTERVAL', '1.0')

    # File I/O Configuration
    TEST_FILES_FOLDER: str = os.getenv('TEST_FILES_FOLDER', 'test_files')
    OUTPUT_FOLDER: str | None = os.getenv('OUTPUT_FOLDER')
    OUTPUT_STATS_FILE: str | None = os.getenv('OUTPUT_STATS_FILE')

    @classmethod
    def poll_interval(cls) -> float:
        """Return the polling interval as seconds.

        Raises:
            ConfigError: If LUIS_POLL_INTERVAL is not a number.
        """
        try:
            return float(cls.LUIS_POLL_INTERVAL)
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f'LUIS_POLL_INTERVAL must be a number of seconds, got {cls.LUIS_POLL_INTERVAL!r}',
                config_key='LUIS_POLL_INTERVAL',
            ) from e

    @classmethod
    def output_folder_for(cls, input_folder: str | Path) -> Path:
        """Return the output folder, falling back to an 'output' sub-folder of the input.

        Args:
            input_folder: Folder containing the files to test.
        """
        if cls.OUTPUT_FOLDER:
            return Path(cls.OUTPUT_FOLDER)
        return Path(input_folder) / 'output'

    @classmethod
    def get_required_configs(cls) -> dict[str, str | None]:
        """Get required configurations for talking to the prediction endpoint.

        Returns:
            Dictionary of required configuration keys and their values.
        """
        return {
            'LUIS_ENDPOINT_BASE_URI': cls.LUIS_ENDPOINT_BASE_URI,
            'LUIS_PREDICTION_KEY': cls.LUIS_PREDICTION_KEY,
            'LUIS_APP_ID': cls.LUIS_APP_ID,
            'LUIS_MODEL_SLOT': cls.LUIS_MODEL_SLOT,
        }
