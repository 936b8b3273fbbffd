"""Long-running operation poller for the LUIS document prediction API.

A remote operation is started with a POST whose response carries the
operation location in the ``Operation-location`` header. The location is then
polled until the service reports a terminal status; a succeeded status
response carries, in the same header, the location of the final result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, ClassVar, TypeVar
from urllib.parse import urlsplit

from multidict import CIMultiDictProxy

from .exceptions import (
    InvalidArgumentError,
    OperationFailedError,
    OperationTimeoutError,
    ProtocolViolationError,
)
from .models import OperationStatus
from .responses import OperationStatusResponse
from .transport import HttpTransport, Shape

T = TypeVar('T')

# Type aliases
SleepFunction = Callable[[float], Awaitable[Any]]


class OperationPoller:
    """Drives a remote operation from start to its final result.

    Polls are strictly sequential. Cancelling the awaiting task interrupts the
    current request or the sleep between polls, and no further request is made.
    """

    OPERATION_LOCATION_HEADER: ClassVar[str] = 'Operation-location'
    DEFAULT_POLL_INTERVAL: ClassVar[float] = 1.0  # seconds

    def __init__(
        self,
        transport: HttpTransport,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait_time: float | None = None,
        sleep: SleepFunction = asyncio.sleep,
    ) -> None:
        """Initialize the poller.

        Args:
            transport: Transport used for every request.
            poll_interval: Time between status checks in seconds.
            max_wait_time: Optional deadline in seconds for an operation to
                reach a terminal status; None waits indefinitely.
            sleep: Coroutine function used to wait between polls.

        Raises:
            InvalidArgumentError: If poll_interval or max_wait_time is not positive.
        """
        if poll_interval <= 0:
            raise InvalidArgumentError(
                'poll_interval must be > 0.', field='poll_interval', value=poll_interval
            )
        if max_wait_time is not None and max_wait_time <= 0:
            raise InvalidArgumentError(
                'max_wait_time must be > 0.', field='max_wait_time', value=max_wait_time
            )

        self.transport = transport
        self.poll_interval = poll_interval
        self.max_wait_time = max_wait_time
        self._sleep = sleep

    @classmethod
    def get_operation_location(cls, headers: CIMultiDictProxy[str]) -> str:
        """Read the single operation location from response headers.

        The header is used both for the location of a running operation and,
        once it succeeded, for the location of its result.

        Args:
            headers: Response headers.

        Returns:
            The absolute operation location URI.

        Raises:
            ProtocolViolationError: If the header is missing, repeated or not
                an absolute URI.
        """
        values = headers.getall(cls.OPERATION_LOCATION_HEADER, [])
        if len(values) != 1:
            raise ProtocolViolationError(
                f'Expected exactly one {cls.OPERATION_LOCATION_HEADER} header, '
                f'found {len(values)}',
                header_name=cls.OPERATION_LOCATION_HEADER,
                occurrences=len(values),
            )

        location = values[0].strip()
        parts = urlsplit(location)
        if not parts.scheme or not parts.netloc:
            raise ProtocolViolationError(
                f'{cls.OPERATION_LOCATION_HEADER} is not an absolute URI: {location!r}',
                header_name=cls.OPERATION_LOCATION_HEADER,
                occurrences=1,
            )
        return location

    async def start(self, uri: str, *, json: Any = None, data: Any = None) -> str:
        """Start a remote operation and return its operation location.

        Args:
            uri: Start endpoint.
            json: JSON request body.
            data: Form request body.

        Returns:
            The operation location to poll.

        Raises:
            ProtocolViolationError: If the response has no single operation location.
            PredictionClientError: If the start request fails.
        """
        _, headers = await self.transport.post(uri, json=json, data=data)
        operation_uri = self.get_operation_location(headers)
        logging.info('Started operation %s', operation_uri)
        return operation_uri

    async def wait_for_result(self, operation_uri: str, shape: Shape[T]) -> T:
        """Poll an operation until it ends and fetch its result.

        Args:
            operation_uri: Location of the running operation.
            shape: Callable decoding the final result body.

        Returns:
            The decoded final result.

        Raises:
            OperationFailedError: If the operation reports a status other than
                notstarted, running or succeeded.
            OperationTimeoutError: If max_wait_time elapses first.
            ProtocolViolationError: If the succeeded response has no single
                result location.
            PredictionClientError: If a poll or the fetch request fails.
        """
        start_time = time.monotonic()
        polls = 0

        while True:
            status_response, headers = await self.transport.get(
                operation_uri, OperationStatusResponse.from_json
            )
            polls += 1
            status = OperationStatus.from_wire(status_response.status)
            logging.debug(
                'Operation %s status: %s (poll %d)', operation_uri, status_response.status, polls
            )

            if status.is_terminal:
                if status is not OperationStatus.SUCCEEDED:
                    logging.error(
                        'Operation %s ended with status %s', operation_uri, status_response.status
                    )
                    raise OperationFailedError(
                        f'Operation {operation_uri} failed with status {status_response.status}',
                        operation='wait_for_result',
                        operation_uri=operation_uri,
                        status=status_response.status,
                    )
                result_uri = self.get_operation_location(headers)
                logging.info(
                    'Operation %s succeeded after %d polls in %.2fs',
                    operation_uri,
                    polls,
                    time.monotonic() - start_time,
                )
                break

            if self.max_wait_time is not None and time.monotonic() - start_time > self.max_wait_time:
                raise OperationTimeoutError(
                    f'Operation {operation_uri} did not complete within {self.max_wait_time} seconds',
                    operation='wait_for_result',
                    operation_uri=operation_uri,
                    timeout_seconds=self.max_wait_time,
                )

            # Not done yet: wait before polling again (non-blocking)
            await self._sleep(self.poll_interval)

        result, _ = await self.transport.get(result_uri, shape)
        return result

    async def run(
        self,
        uri: str,
        shape: Shape[T],
        *,
        json: Any = None,
        data: Any = None,
    ) -> T:
        """Start an operation, wait for it to end and return its decoded result."""
        operation_uri = await self.start(uri, json=json, data=data)
        return await self.wait_for_result(operation_uri, shape)
