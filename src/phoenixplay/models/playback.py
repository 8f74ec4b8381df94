"""Playback state model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class StyleMode(StrEnum):
    FLAT = "flat"
    EXTRUDED = "extruded"


class PlaybackState(BaseModel):
    """Per-dataset playback state.

    Owned by :class:`~phoenixplay.timeline.playback.PlaybackController`;
    every other reader gets it through the controller. Replaced wholesale
    on each change so snapshots handed out earlier never mutate.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    current_bucket: int | float | None = None
    style_mode: StyleMode = StyleMode.FLAT
    opacity: float = Field(default=0.4, ge=0.0, le=1.0)
