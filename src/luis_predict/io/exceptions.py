"""Output exceptions for the LUIS batch tester."""

from __future__ import annotations


class OutputError(Exception):
    """Exception raised for output operations errors."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        output_type: str | None = None
    ) -> None:
        """Initialize OutputError.

        Args:
            message: Error message.
            file_path: Optional output file path.
            output_type: Optional kind of output being written ('result', 'stats').
        """
        super().__init__(message)
        self.file_path = file_path
        self.output_type = output_type
