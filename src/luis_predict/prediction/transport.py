"""HTTP transport for the LUIS document prediction API, built on aiohttp."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any, ClassVar, TypeVar, TYPE_CHECKING

import aiohttp
from multidict import CIMultiDictProxy

from .exceptions import DecodeError, InvalidArgumentError, RemoteCallError, TransportError

if TYPE_CHECKING:  # Only for type-checkers; not needed at runtime.
    from aiohttp import ClientTimeout

T = TypeVar('T')

# Type aliases
Shape = Callable[[Any], T]
Headers = CIMultiDictProxy[str]


class HttpTransport:
    """Executes HTTP requests and classifies their outcome.

    One transport is created per prediction client. Its session (and with it
    the connection pool) is shared by every call made through the client; the
    default headers are fixed at construction.
    """

    SUBSCRIPTION_KEY_HEADER: ClassVar[str] = 'Ocp-Apim-Subscription-Key'
    DEFAULT_TIMEOUT: ClassVar[float] = 100.0

    def __init__(
        self,
        subscription_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            subscription_key: Prediction key sent with every request.
            timeout: Total timeout of a single request in seconds.
            session: Optional session to use instead of an owned one. A
                supplied session is not closed by the transport.

        Raises:
            InvalidArgumentError: If the key is empty or the timeout is not positive.
        """
        if not subscription_key:
            raise InvalidArgumentError(
                'Subscription key must be provided for HttpTransport.',
                field='subscription_key',
            )
        if timeout <= 0:
            raise InvalidArgumentError('timeout must be > 0.', field='timeout', value=timeout)

        self._headers = {
            self.SUBSCRIPTION_KEY_HEADER: subscription_key,
            'Accept': 'application/json',
        }
        self.timeout = timeout
        self._timeout_config: ClientTimeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    @property
    def default_headers(self) -> dict[str, str]:
        """Copy of the headers attached to every request."""
        return dict(self._headers)

    def _get_session(self) -> aiohttp.ClientSession:
        # Created lazily so that the session binds to the running event loop.
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout_config)
            self._owns_session = True
        return self._session

    async def get(self, uri: str, shape: Shape[T] | None = None) -> tuple[T | None, Headers]:
        """Perform an HTTP GET.

        Args:
            uri: Absolute URI to request.
            shape: Callable turning the parsed JSON body into the caller's type;
                when None the body is ignored.

        Returns:
            Tuple of (decoded body or None, response headers).

        Raises:
            RemoteCallError: If the response status is not 2xx.
            DecodeError: If the body is not valid JSON or does not fit the shape.
            TransportError: On network failures or timeouts.
        """
        return await self._request('GET', uri, shape)

    async def post(
        self,
        uri: str,
        *,
        json: Any = None,
        data: Any = None,
        shape: Shape[T] | None = None,
    ) -> tuple[T | None, Headers]:
        """Perform an HTTP POST with a JSON or form body.

        Args:
            uri: Absolute URI to request.
            json: JSON-serializable request body.
            data: Form or raw request body (e.g. aiohttp.FormData).
            shape: Callable turning the parsed JSON body into the caller's type;
                when None the body is ignored.

        Returns:
            Tuple of (decoded body or None, response headers).

        Raises:
            RemoteCallError: If the response status is not 2xx.
            DecodeError: If the body is not valid JSON or does not fit the shape.
            TransportError: On network failures or timeouts.
        """
        return await self._request('POST', uri, shape, json=json, data=data)

    async def _request(
        self,
        method: str,
        uri: str,
        shape: Shape[T] | None,
        **kwargs: Any,
    ) -> tuple[T | None, Headers]:
        session = self._get_session()
        logging.debug('HTTP %s %s', method, uri)

        try:
            async with session.request(
                method, uri, headers=self._headers, timeout=self._timeout_config, **kwargs
            ) as response:
                body = await response.read()
                encoding = response.get_encoding()
                if not 200 <= response.status < 300:
                    logging.error(
                        'HTTP %s to %s failed with status %d (%s)',
                        method,
                        uri,
                        response.status,
                        response.reason,
                    )
                    raise RemoteCallError(
                        method=method,
                        uri=uri,
                        status_code=response.status,
                        reason=response.reason,
                        response_text=body.decode(encoding, errors='replace') or None,
                    )
                headers = response.headers
        except asyncio.TimeoutError as e:
            raise TransportError(
                f'HTTP {method} to {uri} timed out after {self.timeout}s',
                method=method,
                uri=uri,
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                f'HTTP {method} to {uri} failed: {e}',
                method=method,
                uri=uri,
            ) from e

        if shape is None:
            return None, headers
        return self._decode(body, encoding, shape, method, uri), headers

    @staticmethod
    def _decode(body: bytes, encoding: str, shape: Shape[T], method: str, uri: str) -> T:
        """Parse a response body as JSON and apply the expected shape.

        Raises:
            DecodeError: If the body is not text in its declared encoding,
                or if parsing or shaping fails.
        """
        try:
            text = body.decode(encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(
                f'Response to HTTP {method} {uri} is not valid {encoding}: {e}',
                uri=uri,
                content=body.decode(encoding, errors='replace'),
            ) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(
                f'Invalid JSON in response to HTTP {method} {uri}: {e}',
                uri=uri,
                content=text,
            ) from e

        try:
            return shape(data)
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(
                f'Unexpected response shape from HTTP {method} {uri}: {e}',
                uri=uri,
                content=text,
            ) from e

    async def close(self) -> None:
        """Close the owned session, if one was opened."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logging.debug('HTTP transport session closed')
