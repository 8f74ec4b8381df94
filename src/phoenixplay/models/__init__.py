"""Data models for records, buckets, layers and playback state."""

from phoenixplay._constants import hhmm_to_minutes
from phoenixplay.models._base import PhoenixModel
from phoenixplay.models.bucket import Bucket, LayerHandle
from phoenixplay.models.dataset import DatasetDescriptor, DatasetKind
from phoenixplay.models.layers import (
    ActorLayerDescription,
    ActorPaint,
    BurnLayerDescription,
    BurnPaint,
    LayerDescription,
    RenderKind,
    describe_actor_layer,
    describe_burn_layer,
)
from phoenixplay.models.playback import PlaybackState, StyleMode
from phoenixplay.models.records import (
    ACTIVITY_COLORS,
    ActivityType,
    ActorStateRecord,
    BurnRecord,
    FeatureCollection,
    TimedRecord,
)

__all__ = [
    "ACTIVITY_COLORS",
    "ActivityType",
    "ActorLayerDescription",
    "ActorPaint",
    "ActorStateRecord",
    "Bucket",
    "BurnLayerDescription",
    "BurnPaint",
    "BurnRecord",
    "DatasetDescriptor",
    "DatasetKind",
    "FeatureCollection",
    "LayerDescription",
    "LayerHandle",
    "PhoenixModel",
    "PlaybackState",
    "RenderKind",
    "StyleMode",
    "TimedRecord",
    "describe_actor_layer",
    "describe_burn_layer",
    "hhmm_to_minutes",
]
