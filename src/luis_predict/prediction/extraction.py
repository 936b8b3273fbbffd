"""Decoding of hierarchical extraction payloads into ExtractionInstance trees.

The ``extractors`` payload is an object keyed by entity name whose values are
arrays of instances. A string instance is a leaf holding the extracted text;
an object instance is a composite entity whose own keys are decoded by the
same rules. The reserved ``$instance`` key carries verbose information
(``text`` and ``startIndex``) for each entity, matched to the instances of
the same entity by array index.

Example:
    {
        "order": [{"item": ["burrito"]}],
        "$instance": {"order": [{"text": "1 burrito", "startIndex": 12}]}
    }

decodes to one ``order`` instance with text ``"1 burrito"`` at position 12
and a single ``item`` child with text ``"burrito"``.
"""

from __future__ import annotations

import logging
from typing import Any

from .exceptions import DecodeError
from .models import ExtractionInstance

VERBOSE_KEY = '$instance'


def decode_extractions(raw_entities: Any) -> list[ExtractionInstance]:
    """Decode a raw extraction object into a flat list of top-level instances.

    Args:
        raw_entities: Parsed JSON value of an ``extractors`` object.

    Returns:
        Instances in first-seen entity order, each entity's instances in
        array order. Anything other than a JSON object decodes to an empty list.

    Raises:
        DecodeError: If a verbose record is malformed.
    """
    if not isinstance(raw_entities, dict):
        return []

    # Instances stay indexable per entity until the verbose pass has run.
    instances_by_entity: dict[str, list[ExtractionInstance]] = {}
    for entity_name, raw_instances in raw_entities.items():
        if entity_name == VERBOSE_KEY:
            continue
        instances_by_entity[entity_name] = _decode_entity_instances(entity_name, raw_instances)

    raw_verbose = raw_entities.get(VERBOSE_KEY)
    if isinstance(raw_verbose, dict):
        _merge_verbose_information(instances_by_entity, raw_verbose)

    return [
        instance
        for instances in instances_by_entity.values()
        for instance in instances
    ]


def _decode_entity_instances(entity_name: str, raw_instances: Any) -> list[ExtractionInstance]:
    if not isinstance(raw_instances, list):
        logging.debug(
            'Ignoring entity %s: expected an array of instances, got %s',
            entity_name,
            type(raw_instances).__name__,
        )
        return []

    instances: list[ExtractionInstance] = []
    for raw_instance in raw_instances:
        if isinstance(raw_instance, dict):
            # Composite entity: its members are child entities.
            children = decode_extractions(raw_instance)
            instances.append(ExtractionInstance.from_values(entity_name, None, None, children))
        elif isinstance(raw_instance, str):
            instances.append(ExtractionInstance.from_values(entity_name, raw_instance, None))
        # numbers, booleans, nulls and nested arrays carry no entity
    return instances


def _merge_verbose_information(
    instances_by_entity: dict[str, list[ExtractionInstance]],
    raw_verbose: dict[str, Any],
) -> None:
    """Replace instances with copies carrying verbose text and position.

    Verbose records correspond 1-to-1 with the decoded instances, so an entity
    whose record count differs is left untouched.
    """
    for entity_name, raw_records in raw_verbose.items():
        instances = instances_by_entity.get(entity_name)
        if instances is None or not isinstance(raw_records, list):
            continue
        if len(raw_records) != len(instances):
            logging.debug(
                'Verbose information for entity %s has %d records for %d instances; ignoring it',
                entity_name,
                len(raw_records),
                len(instances),
            )
            continue

        for index, raw_record in enumerate(raw_records):
            text, position = _parse_verbose_record(entity_name, raw_record)
            instances[index] = ExtractionInstance.from_values(
                entity_name, text, position, instances[index].children
            )


def _parse_verbose_record(entity_name: str, raw_record: Any) -> tuple[str | None, int]:
    if not isinstance(raw_record, dict):
        raise DecodeError(
            f'Verbose record for entity {entity_name} must be an object',
            operation='decode_extractions',
            content=repr(raw_record),
        )

    text = raw_record.get('text')
    position = raw_record.get('startIndex')
    if text is not None and not isinstance(text, str):
        raise DecodeError(
            f'Verbose record for entity {entity_name} has a non-string text',
            operation='decode_extractions',
            content=repr(raw_record),
        )
    if isinstance(position, bool) or not isinstance(position, int):
        raise DecodeError(
            f'Verbose record for entity {entity_name} has no integer startIndex',
            operation='decode_extractions',
            content=repr(raw_record),
        )
    return text, position
