"""Layer registry.

The only component allowed to create or destroy surface resources. Each
bucket is realized as one source plus one layer, created exactly once per
load cycle and destroyed exactly once per clear.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from phoenixplay._surface import RenderSurface
from phoenixplay.exceptions import DuplicateRegistrationError, ResourceNotFoundError
from phoenixplay.models.bucket import Bucket, LayerHandle
from phoenixplay.models.layers import LayerDescription

_logger = logging.getLogger(__name__)

LayerDescriber = Callable[[LayerHandle], LayerDescription]
"""Builds the description a handle's layer is created with."""


class LayerRegistry:
    """Tracks which buckets are currently realized on the surface.

    Parameters
    ----------
    surface
        Rendering surface receiving create/destroy calls.
    prefix
        Identifier prefix, e.g. ``"phoenix"`` -> ``phoenix-layer0``.
    describe
        Called for every layer creation. Reads the current style so the
        rendering shape follows the playback state at registration time.
    before_layer
        Optional surface layer id new layers are inserted beneath.
    """

    def __init__(
        self,
        surface: RenderSurface,
        *,
        prefix: str,
        describe: LayerDescriber,
        before_layer: str | None = None,
    ) -> None:
        self._surface = surface
        self._prefix = prefix
        self._describe = describe
        self._before_layer = before_layer
        self._handles: dict[int, LayerHandle] = {}

    @property
    def prefix(self) -> str:
        return self._prefix

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, bucket_index: object) -> bool:
        return bucket_index in self._handles

    def count(self) -> int:
        """Number of currently registered handles."""
        return len(self._handles)

    def handles(self) -> list[LayerHandle]:
        """Registered handles in bucket order."""
        return [self._handles[index] for index in sorted(self._handles)]

    def get(self, bucket_index: int) -> LayerHandle | None:
        return self._handles.get(bucket_index)

    def handle_for(self, bucket_index: int) -> LayerHandle:
        """Return the handle for *bucket_index*.

        Raises :class:`ResourceNotFoundError` when nothing is registered.
        """
        handle = self._handles.get(bucket_index)
        if handle is None:
            raise ResourceNotFoundError(
                f"No layer registered for bucket {bucket_index}",
                bucket_index=bucket_index,
            )
        return handle

    def _create_layer(self, handle: LayerHandle) -> None:
        description = self._describe(handle).to_surface()
        self._surface.create_layer(description, self._before_layer)
        # New layers start hidden; playback decides what is shown.
        self._surface.set_layer_visibility(handle.layer_id, False)

    def register(self, bucket: Bucket) -> LayerHandle:
        """Realize *bucket* as a source plus a hidden layer.

        Raises :class:`DuplicateRegistrationError` if the bucket index is
        already registered in this load cycle.
        """
        if bucket.index in self._handles:
            raise DuplicateRegistrationError(
                f"Bucket {bucket.index} is already registered under {self._prefix!r}; clear() was not called",
                bucket_index=bucket.index,
            )

        handle = LayerHandle.for_bucket(self._prefix, bucket.index)
        self._surface.create_source(handle.source_id, bucket.collection.model_dump())
        try:
            self._create_layer(handle)
        except Exception:
            self._surface.destroy_source(handle.source_id)
            raise
        self._handles[bucket.index] = handle
        _logger.debug("Registered %s (%d features)", handle.layer_id, bucket.feature_count)
        return handle

    def restyle(self) -> None:
        """Destroy and recreate every layer with a fresh description.

        Sources, and therefore bucket membership, are left untouched. A
        layer already missing from the surface is simply recreated; a bucket
        whose source is gone is skipped and stays without a layer.
        """
        handles = self.handles()
        for handle in handles:
            try:
                self._surface.destroy_layer(handle.layer_id)
            except ResourceNotFoundError:
                _logger.debug("Layer %s already gone from surface", handle.layer_id)
        recreated = 0
        for handle in handles:
            try:
                self._create_layer(handle)
            except ResourceNotFoundError:
                _logger.warning("Cannot recreate %s: source %s is gone", handle.layer_id, handle.source_id)
                continue
            recreated += 1
        _logger.debug("Restyled %d of %d %s layers", recreated, len(handles), self._prefix)

    def clear(self) -> None:
        """Destroy every held layer and source and empty the registry.

        Safe to call when already empty.
        """
        if not self._handles:
            return
        handles = self.handles()
        self._handles = {}
        # Layers reference their sources, so they go first.
        for handle in handles:
            try:
                self._surface.destroy_layer(handle.layer_id)
            except ResourceNotFoundError:
                _logger.debug("Layer %s already gone from surface", handle.layer_id)
        for handle in handles:
            try:
                self._surface.destroy_source(handle.source_id)
            except ResourceNotFoundError:
                _logger.debug("Source %s already gone from surface", handle.source_id)
        _logger.debug("Cleared %d %s handles", len(handles), self._prefix)
