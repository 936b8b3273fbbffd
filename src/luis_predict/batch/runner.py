"""Batch tester running a published LUIS model over a folder of local files.

Every file in the input folder is predicted and its results are written to
``<output folder>/<file stem>.output.json``:

* ``.txt`` files are read as UTF-8 text and predicted in a single call;
* any other file is first converted to text by the service, and each
  returned chunk is predicted separately.
"""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import ClassVar

from tqdm import tqdm

from ..io import OutputError, OutputWriter
from ..prediction import (
    IoFailedError,
    PredictionClient,
    PredictionClientError,
    PredictionOptions,
    PredictionResult,
    PublishSlot,
)
from .stats import ApplicationError, BatchRunStats


class BatchTester:
    """Runs conversion and prediction over every file of a folder, one file at a time."""

    TEXT_SUFFIX: ClassVar[str] = '.txt'

    def __init__(
        self,
        client: PredictionClient,
        app_id: uuid.UUID | str,
        publish_slot: PublishSlot | str,
        *,
        input_folder: str | Path,
        output_folder: str | Path,
        options: PredictionOptions | None = None,
        writer: OutputWriter | None = None,
        show_progress: bool = True,
    ) -> None:
        """Initialize the batch tester.

        Args:
            client: Prediction client used for every call.
            app_id: App ID of the application with the published model.
            publish_slot: Slot of the published model.
            input_folder: Folder containing the files to test.
            output_folder: Folder receiving one output file per input file.
            options: Prediction options applied to every call.
            writer: Output writer, a default OutputWriter when omitted.
            show_progress: Whether to display a tqdm progress bar.
        """
        self.client = client
        self.app_id = app_id
        self.publish_slot = PublishSlot.parse(publish_slot)
        self.input_folder = Path(input_folder)
        self.output_folder = Path(output_folder)
        self.options = options or PredictionOptions()
        self.writer = writer or OutputWriter()
        self.show_progress = show_progress

    def discover_files(self) -> list[Path]:
        """Return the files directly inside the input folder, sorted by name.

        Raises:
            ApplicationError: If the input folder cannot be listed.
        """
        try:
            return sorted(path for path in self.input_folder.iterdir() if path.is_file())
        except OSError as e:
            raise ApplicationError(f'Cannot list input folder {self.input_folder}: {e}') from e

    async def process_file(self, path: Path) -> list[PredictionResult]:
        """Predict a single file.

        Args:
            path: File to predict.

        Returns:
            One prediction result per text chunk of the file.

        Raises:
            PredictionClientError: If reading, conversion or prediction fails.
        """
        if path.suffix.lower() == self.TEXT_SUFFIX:
            logging.info('Reading content of txt file: %s', path)
            chunks = [self._read_text(path)]
        else:
            if path.suffix.lower() not in PredictionClient.SUPPORTED_CONVERSION_EXTENSIONS:
                logging.warning(
                    'File type %s of %s is not supported for conversion; sending it anyway',
                    path.suffix or '(none)',
                    path.name,
                )
            chunks = await self.client.convert_to_text(path)
            logging.debug('Conversion output for %s:\n%s', path.name, ''.join(chunks))

        results: list[PredictionResult] = []
        for index, chunk in enumerate(chunks, start=1):
            logging.info('Running model on chunk %d/%d of %s', index, len(chunks), path.name)
            results.append(
                await self.client.predict(chunk, self.app_id, self.publish_slot, self.options)
            )
        return results

    @staticmethod
    def _read_text(path: Path) -> str:
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise IoFailedError(
                f'Cannot read text file {path}: {e}',
                operation='read_text',
                file_path=str(path),
            ) from e

    async def run(self) -> BatchRunStats:
        """Process every file of the input folder.

        A file that fails is logged and counted; processing continues with the
        next file.

        Returns:
            Statistics of the run.

        Raises:
            ApplicationError: If the input folder cannot be listed.
        """
        stats = BatchRunStats(start_time=time.time())
        files = self.discover_files()
        stats.total_files = len(files)
        logging.info('Found %d file(s) in %s', len(files), self.input_folder)

        for path in tqdm(files, desc='Processing files', disable=not self.show_progress):
            try:
                results = await self.process_file(path)
                output_path = self.writer.write_results(
                    OutputWriter.result_path_for(path, self.output_folder), results
                )
            except (PredictionClientError, OutputError) as e:
                logging.error('Failed to process %s: %s', path.name, e)
                stats.failed_files += 1
                stats.failures[path.name] = str(e)
                continue

            stats.processed_files += 1
            stats.predicted_chunks += len(results)
            stats.output_files.append(str(output_path))

        stats.end_time = time.time()
        stats.processing_time = stats.end_time - stats.start_time
        logging.info(
            'Batch run completed: %d/%d files (%.1f%% success rate), %d chunk(s) predicted in %.2fs',
            stats.processed_files,
            stats.total_files,
            stats.success_rate,
            stats.predicted_chunks,
            stats.processing_time,
        )
        return stats
