"""phoenixplay - temporal bucketing and playback for geotagged event records."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("phoenixplay")
except PackageNotFoundError:
    __version__ = "0+local"
from phoenixplay._surface import InMemorySurface, RenderSurface
from phoenixplay._transport import HttpTransport, Transport
from phoenixplay.client import PhoenixClient
from phoenixplay.config import PhoenixConfig
from phoenixplay.exceptions import (
    DuplicateRegistrationError,
    EmptyDatasetError,
    LoadFailedError,
    MalformedRecordError,
    PhoenixConfigError,
    PhoenixDatasetError,
    PhoenixError,
    ResourceNotFoundError,
)
from phoenixplay.ingestion.timekey import ACTOR_TIME_KEY, BURN_TIME_KEY, TimeKeyExtractor
from phoenixplay.models import (
    ActivityType,
    ActorStateRecord,
    Bucket,
    BurnRecord,
    DatasetDescriptor,
    DatasetKind,
    FeatureCollection,
    LayerHandle,
    PlaybackState,
    StyleMode,
)
from phoenixplay.timeline.bucketizer import bucketize
from phoenixplay.timeline.dataset import DatasetTimeline
from phoenixplay.timeline.playback import PlaybackController
from phoenixplay.timeline.policy import AccumulationPolicy, VisibilityPolicy
from phoenixplay.timeline.registry import LayerRegistry

__all__ = [
    "__version__",
    "ACTOR_TIME_KEY",
    "AccumulationPolicy",
    "ActivityType",
    "ActorStateRecord",
    "BURN_TIME_KEY",
    "Bucket",
    "BurnRecord",
    "DatasetDescriptor",
    "DatasetKind",
    "DatasetTimeline",
    "DuplicateRegistrationError",
    "EmptyDatasetError",
    "FeatureCollection",
    "HttpTransport",
    "InMemorySurface",
    "LayerHandle",
    "LayerRegistry",
    "LoadFailedError",
    "MalformedRecordError",
    "PhoenixClient",
    "PhoenixConfig",
    "PhoenixConfigError",
    "PhoenixDatasetError",
    "PhoenixError",
    "PlaybackController",
    "PlaybackState",
    "RenderSurface",
    "ResourceNotFoundError",
    "StyleMode",
    "TimeKeyExtractor",
    "Transport",
    "VisibilityPolicy",
    "bucketize",
]
