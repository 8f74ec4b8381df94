"""Time bucketing.

Sorts records by time and partitions them into ``N`` fixed-width buckets
with a single forward cursor. The cursor tests each record against the
current bucket's *lower* bound, so bucket ``i`` receives the records of the
window ``[threshold(i-1), threshold(i))`` and records at or past
``threshold(N-1)`` are never consumed. Playback compatibility depends on this
boundary, so it is kept as-is.

Ordering and the cursor test both use each record's ``source_time`` and a
threshold converted into that unit (``i * step / time_scale``), so a value
sitting on a bucket edge lands where the source unit puts it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from phoenixplay.exceptions import EmptyDatasetError
from phoenixplay.models.bucket import Bucket
from phoenixplay.models.records import FeatureCollection
from phoenixplay.timeline.policy import AccumulationPolicy, bucket_count, consumes

_logger = logging.getLogger(__name__)


class _TimedRecord(Protocol):
    @property
    def source_time(self) -> float | None: ...

    @property
    def time_scale(self) -> float: ...

    @property
    def time_key(self) -> float | None: ...

    def as_feature(self) -> dict[str, Any]: ...


class _EntityRecord(_TimedRecord, Protocol):
    @property
    def entity_id(self) -> str: ...


def _sort_key(record: _TimedRecord) -> tuple[int, float]:
    value = record.source_time
    if value is None:
        return (0, 0.0)
    return (1, value)


def _consumed(record: _TimedRecord, threshold_minutes: float) -> bool:
    return consumes(record.source_time, threshold_minutes / record.time_scale)


def sort_records(records: Iterable[_TimedRecord]) -> list[_TimedRecord]:
    """Stable ascending sort by source time with ``None`` first."""
    return sorted(records, key=_sort_key)


def max_time_key(ordered: Sequence[_TimedRecord]) -> float | None:
    """Key of the chronologically last record of an already sorted sequence."""
    if not ordered:
        return None
    return ordered[-1].time_key


def _exclusive(ordered: Sequence[_TimedRecord], total: int, step_minutes: float) -> list[Bucket]:
    buckets: list[Bucket] = []
    j = 0
    for i in range(total):
        threshold = i * step_minutes
        features: list[dict[str, Any]] = []
        while j < len(ordered) and _consumed(ordered[j], threshold):
            features.append(ordered[j].as_feature())
            j += 1
        buckets.append(
            Bucket(
                index=i,
                lower_bound_minutes=threshold,
                step_minutes=step_minutes,
                collection=FeatureCollection(features=features),
            )
        )
    if j < len(ordered):
        _logger.debug("Exclusive bucketing left %d trailing records unconsumed", len(ordered) - j)
    return buckets


def _cumulative_latest(ordered: Sequence[_EntityRecord], total: int, step_minutes: float) -> list[Bucket]:
    # Every entity is placed at its first known state before the cursor runs,
    # so each snapshot covers the full population.
    latest: dict[str, _EntityRecord] = {}
    for record in ordered:
        latest.setdefault(record.entity_id, record)

    buckets: list[Bucket] = []
    j = 0
    for i in range(total):
        threshold = i * step_minutes
        while j < len(ordered) and _consumed(ordered[j], threshold):
            latest[ordered[j].entity_id] = ordered[j]
            j += 1
        buckets.append(
            Bucket(
                index=i,
                lower_bound_minutes=threshold,
                step_minutes=step_minutes,
                collection=FeatureCollection(features=[record.as_feature() for record in latest.values()]),
            )
        )
    return buckets


def bucketize(
    records: Iterable[_TimedRecord],
    *,
    step_minutes: float,
    policy: AccumulationPolicy,
    dataset: str = "",
) -> list[Bucket]:
    """Partition *records* into ordered buckets of ``step_minutes`` each.

    Parameters
    ----------
    records
        Ingested records. Actor-state records must also expose
        ``entity_id`` when *policy* is ``CUMULATIVE_LATEST``.
    step_minutes
        Bucket width; must be positive.
    policy
        Accumulation policy.
    dataset
        Dataset id attached to raised errors.

    Raises
    ------
    EmptyDatasetError
        When *records* is empty.
    ValueError
        When *step_minutes* is not positive.
    """
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    ordered = sort_records(records)
    if not ordered:
        raise EmptyDatasetError("Dataset contains no records", dataset=dataset, stage="bucketize")

    total = bucket_count(max_time_key(ordered), step_minutes)
    if total == 0:
        _logger.warning("Dataset %r spans no time; %d records produce no buckets", dataset, len(ordered))

    if policy == AccumulationPolicy.CUMULATIVE_LATEST:
        buckets = _cumulative_latest(ordered, total, step_minutes)  # type: ignore[arg-type]
    else:
        buckets = _exclusive(ordered, total, step_minutes)

    _logger.debug("Bucketized %d records into %d buckets (%s)", len(ordered), len(buckets), policy.value)
    return buckets
