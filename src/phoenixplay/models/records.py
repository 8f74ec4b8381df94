"""Ingested record models.

Records are immutable once created. Both kinds expose ``time_key`` (minutes
from scenario start, ``None`` for unknown) and ``as_feature()`` so the
bucketizer can treat them uniformly.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from phoenixplay._constants import ACTOR_COLOR_PROPERTY
from phoenixplay.ingestion.normalize import lenient_float


class ActivityType(StrEnum):
    """Activity categories carried by population plans.

    Categories without a mapped member resolve to ``OTHER``.
    """

    HOME = "home"
    WORK = "work"
    BEACH = "beach"
    SHOPS = "shops"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> ActivityType:
        return cls.OTHER

    @property
    def color(self) -> str:
        return ACTIVITY_COLORS[self]


ACTIVITY_COLORS: dict[ActivityType, str] = {
    ActivityType.HOME: "#fbb03b",
    ActivityType.WORK: "#223b53",
    ActivityType.BEACH: "#e55e5e",
    ActivityType.SHOPS: "#3bb2d0",
    ActivityType.OTHER: "#ccc",
}


class FeatureCollection(BaseModel):
    """A GeoJSON FeatureCollection holding one bucket's features."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[dict[str, Any]] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)


class TimedRecord(BaseModel):
    """Common time fields of every ingested record.

    ``source_time`` is the value exactly as read from the payload (hours for
    both fire and population data); ``time_key`` is the same instant in
    minutes. Bucket boundaries are tested against ``source_time`` so they
    fall where the source unit puts them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_time: float | None = None
    time_scale: float = Field(default=1.0, gt=0.0)

    @property
    def time_key(self) -> float | None:
        """Minutes from scenario start, ``None`` for unknown."""
        if self.source_time is None:
            return None
        return self.source_time * self.time_scale


class BurnRecord(TimedRecord):
    """One fire progression polygon.

    Parameters
    ----------
    source_time : float or None
        ``HOUR_BURNT`` of the polygon.
    time_scale : float
        Minutes per ``source_time`` unit.
    feature : dict
        The original GeoJSON feature, passed through untouched.
    """

    feature: dict[str, Any] = Field(default_factory=dict)

    def as_feature(self) -> dict[str, Any]:
        return self.feature


class ActorStateRecord(TimedRecord):
    """Where an entity is, and what it is doing, at the end of an interval."""

    entity_id: str
    end_hr: float | None = None
    x: float | None = None
    y: float | None = None
    activity: ActivityType = ActivityType.OTHER
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("entity_id", mode="before")
    @classmethod
    def _coerce_entity_id(cls, value: Any) -> str:
        if value is None:
            raise ValueError("entity id is required")
        return str(value)

    @field_validator("end_hr", "x", "y", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return lenient_float(value)

    @field_validator("activity", mode="before")
    @classmethod
    def _coerce_activity(cls, value: Any) -> ActivityType:
        if value is None:
            return ActivityType.OTHER
        return ActivityType(str(value).strip().lower())

    def as_feature(self) -> dict[str, Any]:
        """Synthesize the Point feature that represents this state on the map."""
        return {
            "type": "Feature",
            "properties": {
                "person": self.raw.get("id", self.entity_id),
                "end_hr": self.end_hr,
                "type": self.activity.value,
                ACTOR_COLOR_PROPERTY: self.activity.color,
            },
            "geometry": {
                "type": "Point",
                "coordinates": [self.x, self.y],
            },
        }
