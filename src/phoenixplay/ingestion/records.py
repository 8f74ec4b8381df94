"""Payload parsing.

Turns fetched JSON into typed, immutable records. Time keys are read through
:mod:`phoenixplay.ingestion.timekey`; anything that fails there aborts the
whole parse so no partial dataset is produced.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from phoenixplay.exceptions import MalformedRecordError
from phoenixplay.ingestion.timekey import ACTOR_TIME_KEY, BURN_TIME_KEY
from phoenixplay.models.records import ActorStateRecord, BurnRecord

_logger = logging.getLogger(__name__)


def _features_of(payload: Any) -> list[Any]:
    if isinstance(payload, Mapping):
        features = payload.get("features")
        if isinstance(features, list):
            return features
        raise MalformedRecordError("FeatureCollection has no 'features' array", field="features")
    if isinstance(payload, list):
        # A bare feature list is accepted as well.
        return payload
    raise MalformedRecordError(f"Expected a GeoJSON FeatureCollection, got {type(payload).__name__}")


def parse_burn_collection(payload: Any) -> list[BurnRecord]:
    """Parse a fire progression FeatureCollection into burn records."""
    records: list[BurnRecord] = []
    for position, feature in enumerate(_features_of(payload)):
        if not isinstance(feature, Mapping):
            raise MalformedRecordError(f"Feature #{position} is not an object", value=feature)
        records.append(
            BurnRecord(
                source_time=BURN_TIME_KEY.read(feature),
                time_scale=BURN_TIME_KEY.scale,
                feature=dict(feature),
            )
        )
    _logger.debug("Parsed %d burn records", len(records))
    return records


def parse_plan_records(payload: Any) -> list[ActorStateRecord]:
    """Parse a flat array of population plan entries into actor-state records.

    Entities are keyed by the text form of their ``id``; two ids that only
    differ in JSON type (``1`` and ``"1"``) are rejected.
    """
    if not isinstance(payload, list):
        raise MalformedRecordError(f"Expected an array of plan records, got {type(payload).__name__}")

    records: list[ActorStateRecord] = []
    seen_ids: dict[str, Any] = {}
    for position, plan in enumerate(payload):
        if not isinstance(plan, Mapping):
            raise MalformedRecordError(f"Plan #{position} is not an object", value=plan)
        source_time = ACTOR_TIME_KEY.read(plan)
        try:
            record = ActorStateRecord(
                source_time=source_time,
                time_scale=ACTOR_TIME_KEY.scale,
                entity_id=plan.get("id"),
                end_hr=plan.get("end_hr"),
                x=plan.get("x"),
                y=plan.get("y"),
                activity=plan.get("type"),
                raw=dict(plan),
            )
        except ValidationError as exc:
            raise MalformedRecordError(f"Plan #{position} is invalid: {exc}", field="id", value=plan.get("id")) from exc

        raw_id = plan.get("id")
        first_id = seen_ids.setdefault(record.entity_id, raw_id)
        if type(first_id) is not type(raw_id):
            raise MalformedRecordError(
                f"Plan #{position} id {raw_id!r} collides with id {first_id!r} of a different type",
                field="id",
                value=raw_id,
            )
        records.append(record)
    _logger.debug("Parsed %d plan records", len(records))
    return records
