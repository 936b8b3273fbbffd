"""Public data models for LUIS document prediction."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .exceptions import InvalidArgumentError


class PublishSlot(Enum):
    """Slot that contains the published model.

    The value is the lower-cased name used in prediction URIs.
    """
    STAGING = 'staging'
    PRODUCTION = 'production'

    @classmethod
    def parse(cls, name: str | PublishSlot) -> PublishSlot:
        """Resolve a slot from its name, ignoring case.

        Args:
            name: Slot name such as 'Production' or 'staging', or a PublishSlot.

        Returns:
            The matching PublishSlot.

        Raises:
            InvalidArgumentError: If the name does not match a slot.
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            try:
                return cls(name.strip().lower())
            except ValueError:
                pass
        raise InvalidArgumentError(
            f'Unknown publish slot: {name!r}. '
            f'Supported slots: {", ".join(slot.value for slot in cls)}',
            field='publish_slot',
            value=name,
        )


class OperationStatus(Enum):
    """Status of a long-running remote operation.

    Based on the status strings reported by the operation location:
    - notstarted: The operation is queued
    - running: The operation is being processed
    - succeeded: The operation finished and its result can be fetched
    - anything else is treated as failed
    """
    NOT_STARTED = 'notstarted'
    RUNNING = 'running'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'

    @classmethod
    def from_wire(cls, value: str) -> OperationStatus:
        """Map a status string from the service, case-insensitively."""
        normalized = value.lower()
        if normalized in (cls.NOT_STARTED.value, cls.RUNNING.value, cls.SUCCEEDED.value):
            return cls(normalized)
        return cls.FAILED

    @property
    def is_terminal(self) -> bool:
        """True once the operation can no longer change state."""
        return self in (OperationStatus.SUCCEEDED, OperationStatus.FAILED)


@dataclass(frozen=True)
class PredictionOptions:
    """Options applied to a single prediction call.

    Attributes:
        include_classifier_scores: Include the score of every classifier in the result.
        include_verbose_extraction: Include verbose extraction information
            (extracted text and position of every instance).
        log_query: Whether the service may retain the query for future training.
    """
    include_classifier_scores: bool = True
    include_verbose_extraction: bool = True
    log_query: bool = False

    @property
    def expand_parameter(self) -> str:
        """Value of the ``$expand`` query parameter for these options."""
        if self.include_classifier_scores and self.include_verbose_extraction:
            return 'classifier,extractor'
        if self.include_classifier_scores:
            return 'classifier'
        if self.include_verbose_extraction:
            return 'extractor'
        return ''


@dataclass(frozen=True)
class ExtractionInstance:
    """An instance extracted from the prediction text.

    Composite entities carry child instances and usually no text of their
    own unless verbose extraction information supplied it.

    Attributes:
        entity_name: Name of the entity for this extraction.
        text: Extracted text, if known.
        position: Starting character offset of the text in the prediction text, if known.
        children: Child extraction instances within this instance.
    """
    entity_name: str
    text: str | None = None
    position: int | None = None
    children: tuple[ExtractionInstance, ...] = ()

    @classmethod
    def from_values(
        cls,
        entity_name: str,
        text: str | None,
        position: int | None,
        children: Iterable[ExtractionInstance] | None = None,
    ) -> ExtractionInstance:
        """Create an ExtractionInstance, copying children into an immutable tuple."""
        return cls(
            entity_name=entity_name,
            text=text,
            position=position,
            children=tuple(children) if children is not None else (),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of this instance and its subtree."""
        return {
            'entityName': self.entity_name,
            'text': self.text,
            'position': self.position,
            'children': [child.to_dict() for child in self.children],
        }

    def __str__(self) -> str:
        return (
            f'[EntityName: {self.entity_name}, Text: {self.text}, '
            f'Position: {self.position}, Children: {len(self.children)} children]'
        )


@dataclass(frozen=True)
class PredictionResult:
    """Result of a prediction call.

    Attributes:
        positive_classifiers: Names of the classifiers predicted positive, in service order.
        classifier_scores: Score of each classifier that reported one (read-only).
        extractions: Top-level extraction instances.
    """
    positive_classifiers: tuple[str, ...] = ()
    classifier_scores: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
    extractions: tuple[ExtractionInstance, ...] = ()

    @classmethod
    def from_values(
        cls,
        positive_classifiers: Iterable[str] | None = None,
        classifier_scores: Mapping[str, float] | None = None,
        extractions: Iterable[ExtractionInstance] | None = None,
    ) -> PredictionResult:
        """Create a PredictionResult; None values become empty collections."""
        return cls(
            positive_classifiers=tuple(positive_classifiers or ()),
            classifier_scores=MappingProxyType(dict(classifier_scores or {})),
            extractions=tuple(extractions or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of the result."""
        return {
            'positiveClassifiers': list(self.positive_classifiers),
            'classifierScores': dict(self.classifier_scores),
            'extractions': [instance.to_dict() for instance in self.extractions],
        }
