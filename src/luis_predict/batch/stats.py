"""Statistics and application-level errors for the batch tester."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


class ApplicationError(Exception):
    """Custom exception for application-level errors."""


@dataclass
class BatchRunStats:
    """Statistics for a batch tester run.

    Attributes:
        total_files: Number of input files discovered.
        processed_files: Number of files whose results were written.
        failed_files: Number of files that failed.
        predicted_chunks: Number of prediction calls that succeeded.
        start_time: Processing start time.
        end_time: Processing end time (0.0 while running).
        processing_time: Total processing time in seconds.
        failures: Input file name mapped to its error message.
    """
    total_files: int = 0
    processed_files: int = 0
    failed_files: int = 0
    predicted_chunks: int = 0
    start_time: float = 0.0
    end_time: float = 0.0
    processing_time: float = 0.0
    failures: Dict[str, str] = field(default_factory=dict)
    output_files: List[str] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Percentage of discovered files that were processed successfully."""
        if self.total_files == 0:
            return 0.0
        return (self.processed_files / self.total_files) * 100.0

    def to_dict(self) -> Dict[str, Any]:
        """Return the statistics as a JSON-serializable dictionary."""
        return {
            'total_files': self.total_files,
            'processed_files': self.processed_files,
            'failed_files': self.failed_files,
            'predicted_chunks': self.predicted_chunks,
            'success_rate': round(self.success_rate, 2),
            'processing_time': round(self.processing_time, 3),
            'failures': dict(self.failures),
            'output_files': list(self.output_files),
        }
