"""LUIS document prediction client and batch tester.

This package provides an asyncio client for running published LUIS models on
documents and texts, and a command line batch tester built on top of it.
"""

__version__ = "0.1.0"

# Import main classes and functions for easy access
from .prediction import (
    ExtractionInstance,
    PredictionClient,
    PredictionClientError,
    PredictionOptions,
    PredictionResult,
    PublishSlot,
)

__all__ = [
    "PredictionClient",
    "PredictionClientError",
    "PredictionOptions",
    "PredictionResult",
    "ExtractionInstance",
    "PublishSlot",
]
