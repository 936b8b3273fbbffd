"""Conversion of raw prediction payloads into PredictionResult objects."""

from __future__ import annotations

from .extraction import decode_extractions
from .models import PredictionResult
from .responses import PredictResponse


def map_prediction_response(response: PredictResponse) -> PredictionResult:
    """Convert a raw prediction response to a PredictionResult.

    Classifiers without a score are left out of ``classifier_scores``.

    Args:
        response: Decoded final result of a prediction operation.

    Returns:
        The PredictionResult for the response.

    Raises:
        DecodeError: If the extraction payload carries malformed verbose records.
    """
    prediction = response.prediction
    classifier_scores = {
        name: classifier.score
        for name, classifier in prediction.classifiers.items()
        if classifier.score is not None
    }
    return PredictionResult.from_values(
        positive_classifiers=prediction.positive_classifiers,
        classifier_scores=classifier_scores,
        extractions=decode_extractions(prediction.extractors),
    )
