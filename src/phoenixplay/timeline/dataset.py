"""Dataset timeline orchestration.

Wires one registry and one playback controller to a dataset kind and owns
the load lifecycle: a loading flag, last-request-wins semantics and an
atomic swap of the previous dataset's layers for the new ones.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from phoenixplay._constants import ACTOR_LAYER_PREFIX, BURN_LAYER_PREFIX
from phoenixplay._surface import RenderSurface
from phoenixplay.config import PhoenixConfig
from phoenixplay.exceptions import LoadFailedError, PhoenixDatasetError
from phoenixplay.ingestion.records import parse_burn_collection, parse_plan_records
from phoenixplay.models.bucket import Bucket, LayerHandle
from phoenixplay.models.dataset import DatasetDescriptor, DatasetKind
from phoenixplay.models.layers import LayerDescription, describe_actor_layer, describe_burn_layer
from phoenixplay.models.playback import PlaybackState, StyleMode
from phoenixplay.timeline.bucketizer import bucketize
from phoenixplay.timeline.playback import PlaybackController
from phoenixplay.timeline.policy import AccumulationPolicy, VisibilityPolicy
from phoenixplay.timeline.registry import LayerRegistry

_logger = logging.getLogger(__name__)

FetchJson = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class _DatasetProfile:
    prefix: str
    accumulation: AccumulationPolicy
    visibility: VisibilityPolicy
    parse: Callable[[Any], Sequence[Any]]
    describe: Callable[[LayerHandle, PlaybackState], LayerDescription]
    show_final_bucket: bool


_PROFILES: dict[DatasetKind, _DatasetProfile] = {
    DatasetKind.BURN: _DatasetProfile(
        prefix=BURN_LAYER_PREFIX,
        accumulation=AccumulationPolicy.EXCLUSIVE,
        visibility=VisibilityPolicy.MONOTONIC,
        parse=parse_burn_collection,
        describe=describe_burn_layer,
        show_final_bucket=True,
    ),
    DatasetKind.ACTOR: _DatasetProfile(
        prefix=ACTOR_LAYER_PREFIX,
        accumulation=AccumulationPolicy.CUMULATIVE_LATEST,
        visibility=VisibilityPolicy.EXCLUSIVE_SNAPSHOT,
        parse=parse_plan_records,
        describe=describe_actor_layer,
        show_final_bucket=False,
    ),
}


def _annotate(exc: PhoenixDatasetError, dataset: str) -> None:
    if not exc.dataset:
        exc.dataset = dataset


class DatasetTimeline:
    """Bucketed playback of one dataset kind on a rendering surface.

    At most one dataset is materialized at a time. A load that is superseded
    by a newer :meth:`load` or :meth:`clear` before its fetch completes
    discards its result instead of registering it.
    """

    def __init__(
        self,
        kind: DatasetKind,
        surface: RenderSurface,
        fetch_json: FetchJson,
        config: PhoenixConfig,
    ) -> None:
        self._kind = DatasetKind(kind)
        self._profile = _PROFILES[self._kind]
        self._fetch_json = fetch_json
        self._config = config
        before_layer = config.burn_before_layer if self._kind == DatasetKind.BURN else config.actor_before_layer
        self._registry = LayerRegistry(
            surface,
            prefix=self._profile.prefix,
            describe=self._describe,
            before_layer=before_layer,
        )
        self._controller = PlaybackController(
            surface,
            self._registry,
            policy=self._profile.visibility,
            step_minutes=config.step_minutes,
            default_opacity=config.default_opacity,
        )
        self._descriptor: DatasetDescriptor | None = None
        self._buckets: tuple[Bucket, ...] = ()
        self._generation = 0
        self._loading = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def kind(self) -> DatasetKind:
        return self._kind

    @property
    def descriptor(self) -> DatasetDescriptor | None:
        return self._descriptor

    @property
    def buckets(self) -> tuple[Bucket, ...]:
        return self._buckets

    @property
    def registry(self) -> LayerRegistry:
        return self._registry

    @property
    def controller(self) -> PlaybackController:
        return self._controller

    @property
    def state(self) -> PlaybackState:
        return self._controller.state

    @property
    def is_loading(self) -> bool:
        return self._loading

    def _describe(self, handle: LayerHandle) -> LayerDescription:
        return self._profile.describe(handle, self._controller.state)

    # ------------------------------------------------------------------
    # Load lifecycle
    # ------------------------------------------------------------------

    async def load(self, descriptor: DatasetDescriptor) -> tuple[Bucket, ...] | None:
        """Fetch, bucketize and register *descriptor*.

        Returns the registered buckets, or ``None`` when a newer request
        superseded this one while it was in flight.

        Raises
        ------
        LoadFailedError
            Fetch failed; the previous dataset stays active.
        MalformedRecordError, EmptyDatasetError
            Payload unusable; the previous dataset is cleared.
        """
        if descriptor.kind != self._kind:
            raise ValueError(f"{descriptor.id!r} is a {descriptor.kind} dataset, expected {self._kind}")

        url = self._config.resolve_url(descriptor.url)
        self._generation += 1
        generation = self._generation
        self._loading = True
        _logger.debug("Loading %s dataset %r from %s", self._kind, descriptor.id, url)

        try:
            payload = await self._fetch_json(url)
        except LoadFailedError as exc:
            _annotate(exc, descriptor.id)
            if generation != self._generation:
                _logger.debug("Dropping fetch failure of superseded load %r", descriptor.id)
                return None
            self._loading = False
            raise
        except BaseException:
            # Includes cancellation of the awaiting task.
            if generation == self._generation:
                self._loading = False
            raise

        if generation != self._generation:
            _logger.debug("Discarding superseded load of %r", descriptor.id)
            return None

        try:
            buckets = bucketize(
                self._profile.parse(payload),
                step_minutes=self._config.step_minutes,
                policy=self._profile.accumulation,
                dataset=descriptor.id,
            )
        except PhoenixDatasetError as exc:
            _annotate(exc, descriptor.id)
            self._teardown()
            raise

        self._apply(descriptor, buckets)
        return self._buckets

    def _apply(self, descriptor: DatasetDescriptor, buckets: Sequence[Bucket]) -> None:
        self._registry.clear()
        self._controller.reset()
        if self._profile.visibility == VisibilityPolicy.MONOTONIC:
            self._controller.set_ignition(descriptor.ignition_minutes)
        try:
            for bucket in buckets:
                self._registry.register(bucket)
        except Exception:
            self._teardown()
            raise

        self._descriptor = descriptor
        self._buckets = tuple(buckets)
        if self._profile.show_final_bucket:
            target = self._controller.final_bucket_target()
            if target is not None:
                self._controller.seek(target)
        self._loading = False
        _logger.debug("Loaded %s dataset %r: %d buckets", self._kind, descriptor.id, len(self._buckets))

    def _teardown(self) -> None:
        self._registry.clear()
        self._controller.reset()
        self._descriptor = None
        self._buckets = ()
        self._loading = False

    def clear(self) -> None:
        """Drop the active dataset and invalidate any in-flight load."""
        self._generation += 1
        self._teardown()

    def reload(self) -> None:
        """Recreate every layer (e.g. after the surface lost them) and re-apply the last seek."""
        if self._loading:
            _logger.debug("Reload ignored while %s dataset is loading", self._kind)
            return
        self._registry.restyle()
        current = self._controller.state.current_bucket
        if current is not None:
            self._controller.seek(current)

    # ------------------------------------------------------------------
    # Playback (ignored while loading)
    # ------------------------------------------------------------------

    def seek(self, target: int | float | None) -> None:
        if self._loading:
            _logger.debug("Seek to %s ignored while %s dataset is loading", target, self._kind)
            return
        self._controller.seek(target)

    def set_opacity(self, value: float) -> None:
        if self._loading:
            _logger.debug("Opacity change ignored while %s dataset is loading", self._kind)
            return
        self._controller.set_opacity(value)

    def set_style(self, mode: StyleMode) -> None:
        if self._loading:
            _logger.debug("Style change ignored while %s dataset is loading", self._kind)
            return
        self._controller.set_style(mode)

    def toggle_3d(self) -> StyleMode | None:
        if self._loading:
            _logger.debug("3D toggle ignored while %s dataset is loading", self._kind)
            return None
        return self._controller.toggle_3d()
