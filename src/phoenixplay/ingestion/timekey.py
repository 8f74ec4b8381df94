"""Time-key extraction.

Maps a raw payload entry to its ordering key in minutes from scenario start.
``None`` is the null sentinel: it sorts before every numeric key and lands
in bucket 0.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from phoenixplay.ingestion.normalize import strict_float

MINUTES_PER_HOUR = 60.0


@dataclass(frozen=True, slots=True)
class TimeKeyExtractor:
    """Read one numeric field from a raw record and convert it to minutes.

    Parameters
    ----------
    field
        Name of the time field.
    scale
        Multiplier from the field's unit to minutes (``60`` for hours).
    container
        Optional key of a nested mapping holding *field*, e.g.
        ``"properties"`` for GeoJSON features.
    """

    field: str
    scale: float = 1.0
    container: str | None = None

    def _lookup(self, raw: Mapping[str, Any]) -> Any:
        source: Any = raw
        if self.container is not None:
            source = raw.get(self.container)
            if not isinstance(source, Mapping):
                return None
        return source.get(self.field)

    def read(self, raw: Mapping[str, Any]) -> float | None:
        """Return the field in its own unit, or ``None`` when absent.

        Raises :class:`~phoenixplay.exceptions.MalformedRecordError` only when
        the field is present but not numeric.
        """
        return strict_float(self._lookup(raw), field=self.field)

    def extract(self, raw: Mapping[str, Any]) -> float | None:
        """Return the record's key in minutes, or ``None`` when absent."""
        value = self.read(raw)
        if value is None:
            return None
        return value * self.scale

    __call__ = extract


BURN_TIME_KEY = TimeKeyExtractor("HOUR_BURNT", scale=MINUTES_PER_HOUR, container="properties")
"""Fire progression features: ``properties.HOUR_BURNT`` in hours."""

ACTOR_TIME_KEY = TimeKeyExtractor("end_hr", scale=MINUTES_PER_HOUR)
"""Population plan entries: ``end_hr`` in hours."""
