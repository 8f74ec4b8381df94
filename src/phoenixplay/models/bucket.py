"""Bucket and layer handle models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from phoenixplay.models.records import FeatureCollection


class Bucket(BaseModel):
    """One fixed-width time window's worth of features.

    ``lower_bound_minutes`` is ``index * step_minutes``. The bucketizer's
    cursor consumes records strictly below this bound, so with the exclusive
    policy a bucket holds the window that ends at its lower bound.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    index: int = Field(..., ge=0)
    lower_bound_minutes: float
    step_minutes: float
    collection: FeatureCollection = Field(default_factory=FeatureCollection)

    @property
    def upper_bound_minutes(self) -> float:
        return self.lower_bound_minutes + self.step_minutes

    @property
    def feature_count(self) -> int:
        return len(self.collection)


class LayerHandle(BaseModel):
    """Identifiers a bucket is realized under on the rendering surface."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bucket_index: int = Field(..., ge=0)
    source_id: str
    layer_id: str

    @classmethod
    def for_bucket(cls, prefix: str, bucket_index: int) -> LayerHandle:
        """Build the stable ids for *bucket_index* (``<prefix>-layer<i>``)."""
        return cls(
            bucket_index=bucket_index,
            source_id=f"{prefix}-source{bucket_index}",
            layer_id=f"{prefix}-layer{bucket_index}",
        )
