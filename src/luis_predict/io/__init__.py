"""Output operations for the LUIS batch tester."""

from .exceptions import OutputError
from .output_writer import OutputWriter

__all__ = [
    "OutputWriter",
    "OutputError",
]
