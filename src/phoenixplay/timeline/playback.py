"""Playback control.

Translates a target bucket index into per-layer visibility and pushes style
changes to every registered layer. Never changes bucket membership.
"""

from __future__ import annotations

import logging

from phoenixplay._constants import DEFAULT_OPACITY, OPACITY_PAINT_KEY
from phoenixplay._surface import RenderSurface
from phoenixplay.exceptions import ResourceNotFoundError
from phoenixplay.models.playback import PlaybackState, StyleMode
from phoenixplay.timeline.policy import VisibilityPolicy, is_visible, start_offset
from phoenixplay.timeline.registry import LayerRegistry

_logger = logging.getLogger(__name__)


class PlaybackController:
    """Owns the :class:`PlaybackState` of one dataset.

    Parameters
    ----------
    surface
        Rendering surface receiving visibility and paint calls.
    registry
        Registry of the dataset's buckets.
    policy
        ``MONOTONIC`` for burn playback, ``EXCLUSIVE_SNAPSHOT`` for actors.
    step_minutes
        Bucket width, used to turn the ignition time into a bucket offset.
    default_opacity
        Opacity restored by :meth:`reset`.
    """

    def __init__(
        self,
        surface: RenderSurface,
        registry: LayerRegistry,
        *,
        policy: VisibilityPolicy,
        step_minutes: float,
        default_opacity: float = DEFAULT_OPACITY,
    ) -> None:
        self._surface = surface
        self._registry = registry
        self._policy = policy
        self._step_minutes = step_minutes
        self._default_opacity = default_opacity
        self._ignition_minutes = 0.0
        self._state = PlaybackState(opacity=default_opacity)

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def policy(self) -> VisibilityPolicy:
        return self._policy

    @property
    def start_offset(self) -> float:
        """Bucket offset of the scenario start (``ignition / step``).

        Only the monotonic policy aligns on it.
        """
        if self._policy != VisibilityPolicy.MONOTONIC:
            return 0.0
        return start_offset(self._ignition_minutes, self._step_minutes)

    def set_ignition(self, ignition_minutes: float) -> None:
        self._ignition_minutes = float(ignition_minutes)

    def reset(self) -> None:
        """Back to ``(None, FLAT, default_opacity)``; ignition back to 0."""
        self._ignition_minutes = 0.0
        self._state = PlaybackState(opacity=self._default_opacity)

    def final_bucket_target(self) -> float | None:
        """Target that shows the whole dataset, ``None`` when nothing is registered."""
        total = self._registry.count()
        if total == 0:
            return None
        if self._policy == VisibilityPolicy.MONOTONIC:
            return self.start_offset + total - 1
        return total - 1

    def visibility(self, target: int | float | None) -> list[bool]:
        """Visibility of every registered bucket for *target*, without applying it."""
        offset = self.start_offset
        return [
            is_visible(index, target, policy=self._policy, offset=offset)
            for index in range(self._registry.count())
        ]

    def seek(self, target: int | float | None) -> None:
        """Show the buckets that belong to *target* and hide all others.

        Every registered bucket is swept on each call. Out-of-range targets
        are valid; a bucket without a handle is skipped.
        """
        for index, visible in enumerate(self.visibility(target)):
            try:
                handle = self._registry.handle_for(index)
                self._surface.set_layer_visibility(handle.layer_id, visible)
            except ResourceNotFoundError:
                _logger.debug("Seek skipped bucket %d: no layer", index)
        self._state = self._state.model_copy(update={"current_bucket": target})

    def set_opacity(self, value: float) -> None:
        """Update opacity and push it to every registered layer.

        Only burn layers carry an opacity paint; actor point layers do not.
        """
        if self._policy != VisibilityPolicy.MONOTONIC:
            raise ValueError("opacity is only supported for burn playback")
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"opacity must be within [0, 1], got {value}")
        self._state = self._state.model_copy(update={"opacity": float(value)})
        for handle in self._registry.handles():
            try:
                self._surface.set_layer_paint_property(handle.layer_id, OPACITY_PAINT_KEY, float(value))
            except ResourceNotFoundError:
                _logger.debug("Opacity skipped %s: no layer", handle.layer_id)

    def set_style(self, mode: StyleMode) -> None:
        """Switch the rendering shape of every layer.

        The shape is baked into each layer's description, so the registry
        recreates all layers before the last seek is re-applied.
        """
        if self._policy != VisibilityPolicy.MONOTONIC:
            raise ValueError("style mode is only supported for burn playback")
        mode = StyleMode(mode)
        self._state = self._state.model_copy(update={"style_mode": mode})
        self._registry.restyle()
        if self._state.current_bucket is not None:
            self.seek(self._state.current_bucket)

    def toggle_3d(self) -> StyleMode:
        """Flip between flat and extruded burn layers; returns the new mode."""
        mode = StyleMode.FLAT if self._state.style_mode == StyleMode.EXTRUDED else StyleMode.EXTRUDED
        self.set_style(mode)
        return mode
