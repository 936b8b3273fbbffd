"""Batch testing of a published LUIS model over a folder of documents.

This package runs document conversion and text prediction over every file of
a folder, writing one JSON output file per input file and collecting run
statistics.
"""

from .runner import BatchTester
from .stats import ApplicationError, BatchRunStats

__all__ = [
    "BatchTester",
    "ApplicationError",
    "BatchRunStats",
]
