"""Wire response shapes for the LUIS document prediction API.

Each shape exposes a ``from_json`` classmethod that the transport uses to
decode a parsed JSON body. Shapes raise ``KeyError``, ``TypeError`` or
``ValueError`` when the body does not fit; the transport reports those as
``DecodeError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _require_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f'{what} must be a JSON object, got {type(data).__name__}')
    return data


@dataclass(frozen=True)
class OperationStatusResponse:
    """Body returned by an operation location while it is being polled."""
    status: str

    @classmethod
    def from_json(cls, data: Any) -> OperationStatusResponse:
        status = _require_object(data, 'Operation status')['status']
        if not isinstance(status, str):
            raise TypeError('Operation status must be a string')
        return cls(status=status)


@dataclass(frozen=True)
class ConvertResponse:
    """Final result of a document conversion operation.

    Attributes:
        document_text: JSON-encoded array of text chunks.
    """
    document_text: str

    @classmethod
    def from_json(cls, data: Any) -> ConvertResponse:
        document_text = _require_object(data, 'Conversion result')['documentText']
        if not isinstance(document_text, str):
            raise TypeError('documentText must be a string')
        return cls(document_text=document_text)


@dataclass(frozen=True)
class ClassifierResponse:
    score: float | None = None

    @classmethod
    def from_json(cls, data: Any) -> ClassifierResponse:
        score = _require_object(data, 'Classifier').get('score')
        if score is None:
            return cls()
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise TypeError('Classifier score must be a number')
        return cls(score=float(score))


@dataclass(frozen=True)
class PredictionResponse:
    """Raw prediction payload.

    Attributes:
        positive_classifiers: Names of the classifiers predicted positive.
        classifiers: Per-classifier details keyed by classifier name.
        extractors: Raw hierarchical extraction JSON, decoded separately.
    """
    positive_classifiers: list[str] = field(default_factory=list)
    classifiers: dict[str, ClassifierResponse] = field(default_factory=dict)
    extractors: Any = None

    @classmethod
    def from_json(cls, data: Any) -> PredictionResponse:
        data = _require_object(data, 'Prediction')

        positive_classifiers = data.get('positiveClassifiers') or []
        if not isinstance(positive_classifiers, list) or not all(
            isinstance(name, str) for name in positive_classifiers
        ):
            raise TypeError('positiveClassifiers must be a list of strings')

        raw_classifiers = data.get('classifiers') or {}
        classifiers = {
            name: ClassifierResponse.from_json(value)
            for name, value in _require_object(raw_classifiers, 'classifiers').items()
        }

        return cls(
            positive_classifiers=list(positive_classifiers),
            classifiers=classifiers,
            extractors=data.get('extractors'),
        )


@dataclass(frozen=True)
class PredictResponse:
    """Final result of a prediction operation."""
    prediction: PredictionResponse

    @classmethod
    def from_json(cls, data: Any) -> PredictResponse:
        return cls(
            prediction=PredictionResponse.from_json(
                _require_object(data, 'Prediction result')['prediction']
            )
        )
