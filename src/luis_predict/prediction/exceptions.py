"""Exception classes for LUIS prediction client operations.

This module provides the hierarchy of exceptions raised by the prediction
client, its long-running-operation poller and the HTTP transport beneath them.

The exception hierarchy follows a structured approach:
- PredictionClientError: Base class for all client errors
- InvalidArgumentError: Bad input detected before any I/O
- IoFailedError: Local file access failures during conversion uploads
- RemoteCallError: HTTP responses outside the success range
- TransportError: Network failures and request timeouts
- ProtocolViolationError: Missing or repeated Operation-location headers
- OperationFailedError: Remote operation reported a non-success terminal status
- OperationTimeoutError: Operation did not finish within an explicit deadline
- DecodeError: Response bodies that do not match the expected JSON shape

Cancellation is not part of this hierarchy: it propagates as
``asyncio.CancelledError``.
"""

from __future__ import annotations

from typing import Any


class PredictionClientError(Exception):
    """Base exception class for all prediction client operations."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        """Initialize PredictionClientError with context information.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when the error occurred.
        """
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        """Return formatted error message with context."""
        parts = [super().__str__()]
        if self.operation:
            parts.append(f'Operation: {self.operation}')
        return ' | '.join(parts)


class InvalidArgumentError(PredictionClientError, ValueError):
    """Exception for missing or malformed input detected before any I/O."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize InvalidArgumentError with validation context.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when error occurred.
            field: Name of the argument that failed validation.
            value: Value that failed validation.
        """
        super().__init__(message, operation=operation)
        self.field = field
        self.value = value


class IoFailedError(PredictionClientError):
    """Exception for local file access errors during conversion uploads."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        file_path: str | None = None,
    ) -> None:
        """Initialize IoFailedError.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when error occurred.
            file_path: Path of the file that could not be read.
        """
        super().__init__(message, operation=operation)
        self.file_path = file_path


class RemoteCallError(PredictionClientError):
    """Exception for HTTP responses outside the success range.

    Raised for the start, poll and fetch calls alike. The message mirrors the
    response: method, URI, status code, reason phrase and, when non-empty,
    the response body.
    """

    def __init__(
        self,
        *,
        method: str,
        uri: str,
        status_code: int,
        reason: str | None = None,
        response_text: str | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize RemoteCallError with detailed HTTP context.

        Args:
            method: HTTP method of the failed call.
            uri: URI the call was made to.
            status_code: HTTP status code from the response.
            reason: HTTP reason phrase from the response.
            response_text: Raw response body, if any.
            operation: Operation being performed when error occurred.
        """
        message = f'HTTP {method} to {uri} failed with status {status_code} ({reason})'
        if response_text:
            message += f':\n{response_text}'
        super().__init__(message, operation=operation)
        self.method = method
        self.uri = uri
        self.status_code = status_code
        self.reason = reason
        self.response_text = response_text


class TransportError(PredictionClientError):
    """Exception for network connectivity issues and request timeouts."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        method: str | None = None,
        uri: str | None = None,
    ) -> None:
        """Initialize TransportError with network context.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when error occurred.
            method: HTTP method of the failed call.
            uri: URI that could not be reached.
        """
        super().__init__(message, operation=operation)
        self.method = method
        self.uri = uri


class ProtocolViolationError(PredictionClientError):
    """Exception for a missing, repeated or malformed operation location header."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        header_name: str | None = None,
        occurrences: int | None = None,
    ) -> None:
        """Initialize ProtocolViolationError.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when error occurred.
            header_name: Name of the offending response header.
            occurrences: Number of times the header was present.
        """
        super().__init__(message, operation=operation)
        self.header_name = header_name
        self.occurrences = occurrences


class OperationFailedError(PredictionClientError):
    """Exception for a remote operation that reached a non-success terminal status."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        operation_uri: str | None = None,
        status: str | None = None,
    ) -> None:
        """Initialize OperationFailedError.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when error occurred.
            operation_uri: Location of the failed remote operation.
            status: Raw status string reported by the service.
        """
        super().__init__(message, operation=operation)
        self.operation_uri = operation_uri
        self.status = status


class OperationTimeoutError(PredictionClientError):
    """Exception for an operation that did not finish within an explicit deadline."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        operation_uri: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize OperationTimeoutError.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when error occurred.
            operation_uri: Location of the remote operation being polled.
            timeout_seconds: Deadline that was exceeded.
        """
        super().__init__(message, operation=operation)
        self.operation_uri = operation_uri
        self.timeout_seconds = timeout_seconds


class DecodeError(PredictionClientError):
    """Exception for response bodies that cannot be decoded into the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        uri: str | None = None,
        content: str | None = None,
    ) -> None:
        """Initialize DecodeError.

        Args:
            message: Descriptive error message.
            operation: Operation being performed when error occurred.
            uri: URI the undecodable body came from, if known.
            content: The content that failed to decode.
        """
        super().__init__(message, operation=operation)
        self.uri = uri
        self.content = content
