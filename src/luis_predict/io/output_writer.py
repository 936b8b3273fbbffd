"""Output writing operations for the LUIS batch tester.

Prediction results and run statistics are written as JSON documents using
atomic full-file writes (tempfile + replace), so a reader never observes a
partially written output file.
"""

from __future__ import annotations

import json
import logging
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any, ClassVar

from ..prediction import PredictionResult
from .exceptions import OutputError

Pathish = str | Path  # Type alias for path-like objects


class OutputWriter:
    """JSON output writer for prediction results and run statistics."""

    DEFAULT_ENCODING: ClassVar[str] = 'utf-8'
    RESULT_SUFFIX: ClassVar[str] = '.output.json'

    def __init__(self, encoding: str = DEFAULT_ENCODING) -> None:
        """Initialize the OutputWriter.

        Args:
            encoding: Text encoding used for all writes.
        """
        self.encoding = encoding
        logging.debug('OutputWriter initialized with encoding: %s', self.encoding)

    @staticmethod
    def _ensure_output_directory(file_path: Pathish) -> Path:
        """Ensure the output directory exists.

        Raises:
            OutputError: If the output directory cannot be created.
        """
        path = Path(file_path)
        directory = path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            return path
        except OSError as e:
            raise OutputError(
                f'Failed to create output directory {directory}: {e}',
                file_path=str(file_path),
            ) from e

    @staticmethod
    def _atomic_write(file_path: Path, content: str, encoding: str) -> None:
        """Atomically write content to a file.

        Raises:
            OutputError: If the atomic write fails.
        """
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                    mode='w',
                    delete=False,
                    dir=file_path.parent,
                    encoding=encoding,
                    newline='',
                    suffix='.tmp'
            ) as temp_file:
                temp_path = Path(temp_file.name)
                temp_file.write(content)
            # Atomically replace the target file
            temp_path.replace(file_path)
            logging.debug('Atomic write completed for: %s', file_path)
        except (OSError, UnicodeEncodeError) as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise OutputError(
                f'Atomic write failed for {file_path}: {e}',
                file_path=str(file_path),
                output_type='atomic_write'
            ) from e

    @classmethod
    def result_path_for(cls, input_file: Pathish, output_folder: Pathish) -> Path:
        """Return the output path for an input file: '<output_folder>/<stem>.output.json'."""
        return Path(output_folder) / f'{Path(input_file).stem}{cls.RESULT_SUFFIX}'

    def write_results(self, file_path: Pathish, results: Sequence[PredictionResult]) -> Path:
        """Write the prediction results of one input file as a JSON array.

        Args:
            file_path: Output file path.
            results: One result per predicted text chunk.

        Returns:
            The path written to.

        Raises:
            OutputError: If writing fails.
        """
        output_path = self._ensure_output_directory(file_path)
        content = json.dumps(
            [result.to_dict() for result in results], indent=2, ensure_ascii=False
        )
        self._atomic_write(output_path, content, self.encoding)
        logging.info('Wrote %d result(s) to %s', len(results), output_path)
        return output_path

    def write_stats_output(self, file_path: Pathish, stats_data: dict[str, Any]) -> None:
        """Write run statistics to a JSON file.

        Raises:
            ValueError: If stats_data is not a dictionary.
            OutputError: If writing to the file fails.
        """
        if not isinstance(stats_data, dict):
            raise ValueError('Stats data must be a dictionary.')
        output_path = self._ensure_output_directory(file_path)
        try:
            content = json.dumps(stats_data, indent=2, ensure_ascii=False)
        except TypeError as e:
            raise OutputError(
                f'Failed to serialize stats output for {file_path}: {e}',
                file_path=str(file_path),
                output_type='stats'
            ) from e
        self._atomic_write(output_path, content, self.encoding)
        logging.info('Processing statistics written to: %s', output_path)
