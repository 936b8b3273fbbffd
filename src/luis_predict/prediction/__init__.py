"""LUIS document prediction client.

This package provides an asyncio client for the LUIS document prediction API:
document-to-text conversion and text prediction, both run as long-running
remote operations that are started, polled and then fetched.
"""

from .client import PredictionClient
from .exceptions import (
    DecodeError,
    InvalidArgumentError,
    IoFailedError,
    OperationFailedError,
    OperationTimeoutError,
    PredictionClientError,
    ProtocolViolationError,
    RemoteCallError,
    TransportError,
)
from .extraction import decode_extractions
from .mapper import map_prediction_response
from .models import (
    ExtractionInstance,
    OperationStatus,
    PredictionOptions,
    PredictionResult,
    PublishSlot,
)
from .poller import OperationPoller
from .transport import HttpTransport

__all__ = [
    "PredictionClient",
    "OperationPoller",
    "HttpTransport",
    "decode_extractions",
    "map_prediction_response",
    "ExtractionInstance",
    "OperationStatus",
    "PredictionOptions",
    "PredictionResult",
    "PublishSlot",
    "PredictionClientError",
    "InvalidArgumentError",
    "IoFailedError",
    "RemoteCallError",
    "TransportError",
    "ProtocolViolationError",
    "OperationFailedError",
    "OperationTimeoutError",
    "DecodeError",
]
