"""Client for a published LUIS model performing document prediction."""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, ClassVar
from urllib.parse import quote, urljoin

import aiohttp

from .exceptions import DecodeError, InvalidArgumentError, IoFailedError
from .mapper import map_prediction_response
from .models import PredictionOptions, PredictionResult, PublishSlot
from .poller import OperationPoller
from .responses import ConvertResponse, PredictResponse
from .transport import HttpTransport


class PredictionClient:
    """Client for using a published LUIS model to perform prediction.

    Both operations are long-running on the service side: the client starts
    them, polls their operation location and fetches the final result.
    Independent calls may run concurrently on the same client.

    Example:
        async with PredictionClient('https://westus.api.cognitive.microsoft.com/', key) as client:
            chunks = await client.convert_to_text('contract.pdf')
            for chunk in chunks:
                result = await client.predict(chunk, app_id, PublishSlot.PRODUCTION)
    """

    CONVERT_PATH: ClassVar[str] = './luis/prediction/v4.0-preview/documents/convert'
    PREDICT_PATH: ClassVar[str] = (
        './luis/prediction/v4.0-preview/documents/apps/{app_id}/slots/{slot}'
        '/predictText?$expand={expand}&log={log}'
    )
    DOCUMENT_FIELD: ClassVar[str] = 'document'
    SUPPORTED_CONVERSION_EXTENSIONS: ClassVar[frozenset[str]] = frozenset(
        {'.pdf', '.docx', '.pptx', '.eml', '.msg', '.html'}
    )

    def __init__(
        self,
        endpoint_base_uri: str,
        prediction_key: str,
        *,
        poll_interval: float = OperationPoller.DEFAULT_POLL_INTERVAL,
        max_wait_time: float | None = None,
        timeout: float = HttpTransport.DEFAULT_TIMEOUT,
        transport: HttpTransport | None = None,
    ) -> None:
        """Initialize a prediction client.

        Args:
            endpoint_base_uri: Base URI of the LUIS endpoint
                (e.g. https://westus.api.cognitive.microsoft.com/).
            prediction_key: Prediction key for the LUIS endpoint.
            poll_interval: Time between operation status checks in seconds.
            max_wait_time: Optional deadline in seconds for each remote operation.
            timeout: Total timeout of a single HTTP request in seconds.
            transport: Optional pre-built transport (the key and timeout are
                then taken from it).

        Raises:
            InvalidArgumentError: If the endpoint or key is missing or invalid.
        """
        if not endpoint_base_uri:
            raise InvalidArgumentError(
                'Endpoint base URI must be provided for PredictionClient.',
                field='endpoint_base_uri',
            )
        if not prediction_key and transport is None:
            raise InvalidArgumentError(
                'Prediction key must be provided for PredictionClient.',
                field='prediction_key',
            )

        self.endpoint_base_uri = endpoint_base_uri
        self.transport = transport or HttpTransport(prediction_key, timeout=timeout)
        self.poller = OperationPoller(
            self.transport, poll_interval=poll_interval, max_wait_time=max_wait_time
        )

        logging.info(
            'Prediction client initialized with endpoint=%s, poll_interval=%.2fs',
            self.endpoint_base_uri,
            poll_interval,
        )

    @property
    def poll_interval(self) -> float:
        """Time between operation status checks in seconds."""
        return self.poller.poll_interval

    async def __aenter__(self) -> PredictionClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        await self.transport.close()

    # ------------------------------------------------------------------ #
    # URI helpers
    # ------------------------------------------------------------------ #
    def _resolve(self, relative_uri: str) -> str:
        return urljoin(self.endpoint_base_uri, relative_uri)

    def build_convert_uri(self) -> str:
        """Return the URI that starts a document conversion."""
        return self._resolve(self.CONVERT_PATH)

    def build_predict_uri(
        self,
        app_id: uuid.UUID | str,
        publish_slot: PublishSlot | str,
        options: PredictionOptions,
    ) -> str:
        """Return the URI that starts a text prediction.

        Raises:
            InvalidArgumentError: If the app id or slot is invalid.
        """
        app_part = quote(str(self._parse_app_id(app_id)), safe='')
        slot_part = quote(PublishSlot.parse(publish_slot).value, safe='')
        expand_part = quote(options.expand_parameter.lower(), safe=',')
        log_part = quote(str(options.log_query).lower(), safe='')
        return self._resolve(
            self.PREDICT_PATH.format(
                app_id=app_part, slot=slot_part, expand=expand_part, log=log_part
            )
        )

    @staticmethod
    def _parse_app_id(app_id: uuid.UUID | str) -> uuid.UUID:
        if isinstance(app_id, uuid.UUID):
            return app_id
        try:
            return uuid.UUID(str(app_id))
        except ValueError as e:
            raise InvalidArgumentError(
                f'App ID must be a UUID, got {app_id!r}',
                operation='predict',
                field='app_id',
                value=app_id,
            ) from e

    # ------------------------------------------------------------------ #
    # Conversion
    # ------------------------------------------------------------------ #
    async def convert_to_text(self, file_path: str | Path) -> list[str]:
        """Convert a document to text chunks.

        The service supports .pdf, .docx, .pptx, .eml, .msg and .html files and
        detects the format from the file extension. Long documents are split
        into several chunks, each meant for one prediction call.

        Args:
            file_path: Path to the file to convert.

        Returns:
            The text chunks, as returned by the service.

        Raises:
            InvalidArgumentError: If file_path is missing.
            IoFailedError: If the file cannot be read.
            DecodeError: If the converted text is not a JSON array of strings.
            PredictionClientError: If any remote call or the operation fails.
        """
        if file_path is None or str(file_path) == '':
            raise InvalidArgumentError(
                'file_path must be provided', operation='convert_to_text', field='file_path'
            )

        path = Path(file_path)
        convert_uri = self.build_convert_uri()
        logging.info('Converting file %s', path)

        try:
            stream = path.open('rb')
        except OSError as e:
            raise IoFailedError(
                f'Cannot open {path} for reading: {e}',
                operation='convert_to_text',
                file_path=str(path),
            ) from e

        # The file only needs to stay open while the operation is being started.
        with stream:
            form = aiohttp.FormData()
            # Filename without directories; the extension drives format detection.
            form.add_field(self.DOCUMENT_FIELD, stream, filename=path.name)
            operation_uri = await self.poller.start(convert_uri, data=form)

        result = await self.poller.wait_for_result(operation_uri, ConvertResponse.from_json)
        chunks = self._decode_document_text(result.document_text)
        logging.info('Converted %s into %d text chunk(s)', path.name, len(chunks))
        return chunks

    @staticmethod
    def _decode_document_text(document_text: str) -> list[str]:
        """Decode the JSON-encoded chunk array carried in ``documentText``."""
        try:
            chunks = json.loads(document_text)
        except json.JSONDecodeError as e:
            raise DecodeError(
                f'documentText is not valid JSON: {e}',
                operation='convert_to_text',
                content=document_text,
            ) from e

        if not isinstance(chunks, list) or not all(isinstance(chunk, str) for chunk in chunks):
            raise DecodeError(
                'documentText must be a JSON array of strings',
                operation='convert_to_text',
                content=document_text,
            )
        return chunks

    # ------------------------------------------------------------------ #
    # Prediction
    # ------------------------------------------------------------------ #
    async def predict(
        self,
        text: str,
        app_id: uuid.UUID | str,
        publish_slot: PublishSlot | str,
        options: PredictionOptions | None = None,
    ) -> PredictionResult:
        """Use the specified published model to perform prediction on text.

        Args:
            text: Text on which to perform prediction.
            app_id: App ID of the application with the published model.
            publish_slot: Slot of the published model.
            options: Optional prediction options.

        Returns:
            The prediction result.

        Raises:
            InvalidArgumentError: If text is None or app_id/publish_slot is invalid.
            DecodeError: If the prediction payload cannot be decoded.
            PredictionClientError: If any remote call or the operation fails.
        """
        if text is None:
            raise InvalidArgumentError('text must be provided', operation='predict', field='text')

        options = options or PredictionOptions()
        predict_uri = self.build_predict_uri(app_id, publish_slot, options)
        logging.info('Running prediction (text length: %d)', len(text))

        response = await self.poller.run(
            predict_uri, PredictResponse.from_json, json={'query': text}
        )
        result = map_prediction_response(response)
        logging.info(
            'Prediction completed: %d positive classifier(s), %d extraction(s)',
            len(result.positive_classifiers),
            len(result.extractions),
        )
        return result
