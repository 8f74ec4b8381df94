"""Layer descriptions handed to the rendering surface.

A description is a pure function of a bucket's :class:`LayerHandle` and the
current :class:`PlaybackState`; it never depends on bucket membership.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import Field

from phoenixplay._constants import (
    ACTOR_RADIUS_STOPS,
    FIRE_INTENSITY_LEVELS,
    FLAME_HEIGHT_PROPERTY,
    FLAME_HEIGHT_STOPS,
)
from phoenixplay.models._base import PhoenixModel
from phoenixplay.models.bucket import LayerHandle
from phoenixplay.models.playback import PlaybackState, StyleMode


class RenderKind(StrEnum):
    FLAT = "flat"
    EXTRUDED = "extruded"
    POINT = "point"


class BurnPaint(PhoenixModel):
    color_stops: list[tuple[float, str]] = Field(default_factory=lambda: list(FIRE_INTENSITY_LEVELS))
    opacity: float = Field(..., ge=0.0, le=1.0)
    height_stops: list[tuple[float, float]] | None = None


class BurnLayerDescription(PhoenixModel):
    """Fill (flat) or fill-extrusion (extruded) polygon layer."""

    id: str
    source_id: str
    render_kind: Literal[RenderKind.FLAT, RenderKind.EXTRUDED]
    filter: list[Any] | None = None
    paint: BurnPaint


class ActorPaint(PhoenixModel):
    radius_stops: list[tuple[float, float]] = Field(default_factory=lambda: list(ACTOR_RADIUS_STOPS))
    color_mode: Literal["byFeatureProperty"] = "byFeatureProperty"


class ActorLayerDescription(PhoenixModel):
    """Circle layer coloured by each feature's ``color`` property."""

    id: str
    source_id: str
    render_kind: Literal[RenderKind.POINT] = RenderKind.POINT
    paint: ActorPaint = Field(default_factory=ActorPaint)


LayerDescription = BurnLayerDescription | ActorLayerDescription


def describe_burn_layer(handle: LayerHandle, state: PlaybackState) -> BurnLayerDescription:
    """Build the burn layer description for the current style mode."""
    if state.style_mode == StyleMode.EXTRUDED:
        return BurnLayerDescription(
            id=handle.layer_id,
            source_id=handle.source_id,
            render_kind=RenderKind.EXTRUDED,
            filter=["has", FLAME_HEIGHT_PROPERTY],
            paint=BurnPaint(
                opacity=state.opacity,
                height_stops=list(FLAME_HEIGHT_STOPS),
            ),
        )
    return BurnLayerDescription(
        id=handle.layer_id,
        source_id=handle.source_id,
        render_kind=RenderKind.FLAT,
        paint=BurnPaint(opacity=state.opacity),
    )


def describe_actor_layer(handle: LayerHandle, state: PlaybackState) -> ActorLayerDescription:
    """Build the actor layer description; style mode does not apply."""
    return ActorLayerDescription(id=handle.layer_id, source_id=handle.source_id)
