"""Deterministic accumulation and visibility policy.

This module intentionally contains no surface calls and no payload parsing;
it only answers "which records go where" and "which buckets are shown".
"""

from __future__ import annotations

import math
from enum import StrEnum


class AccumulationPolicy(StrEnum):
    EXCLUSIVE = "exclusive"
    """Each bucket holds only the records its cursor step consumed."""
    CUMULATIVE_LATEST = "cumulative_latest"
    """Each bucket holds every known entity at its latest state."""


class VisibilityPolicy(StrEnum):
    MONOTONIC = "monotonic"
    """Buckets at or before the target stay visible (burn playback)."""
    EXCLUSIVE_SNAPSHOT = "exclusive_snapshot"
    """Only the target bucket is visible (actor playback)."""


def bucket_count(max_key: float | None, step_minutes: float) -> int:
    """``ceil(max_key / step)``; ``0`` when no record carries a key."""
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")
    if max_key is None or max_key <= 0:
        return 0
    return math.ceil(max_key / step_minutes)


def consumes(key: float | None, threshold: float) -> bool:
    """Whether the cursor moves a record with *key* into the bucket at *threshold*.

    Unknown keys sort first and are consumed by the first bucket.
    """
    return key is None or key < threshold


def start_offset(ignition_minutes: float, step_minutes: float) -> float:
    """Bucket offset of the scenario start on the shared timeline."""
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")
    return ignition_minutes / step_minutes


def is_visible(
    index: int,
    target: int | float | None,
    *,
    policy: VisibilityPolicy,
    offset: float = 0.0,
) -> bool:
    """Visibility of bucket *index* when playback points at *target*.

    A ``None`` target hides everything. Out-of-range targets are valid and
    simply clamp every bucket to shown or hidden.
    """
    if target is None:
        return False
    if policy == VisibilityPolicy.MONOTONIC:
        return index + offset <= target
    return index == target
