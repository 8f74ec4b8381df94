"""High-level async client driving burn and actor playback on one surface."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from phoenixplay._surface import RenderSurface
from phoenixplay._transport import HttpTransport, Transport
from phoenixplay.config import PhoenixConfig
from phoenixplay.exceptions import PhoenixError
from phoenixplay.models.bucket import Bucket
from phoenixplay.models.dataset import DatasetDescriptor, DatasetKind
from phoenixplay.models.playback import StyleMode
from phoenixplay.timeline.dataset import DatasetTimeline

_logger = logging.getLogger(__name__)


class PhoenixClient:
    """Async client that loads datasets and scrubs their playback.

    Usage::

        async with PhoenixClient(config, surface) as client:
            await client.select(fire_descriptor)
            client.seek(50)
            client.toggle_3d()
    """

    def __init__(
        self,
        config: PhoenixConfig,
        surface: RenderSurface,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._surface = surface
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport
        self.burn = DatasetTimeline(DatasetKind.BURN, surface, self._fetch_json, config)
        self.actor = DatasetTimeline(DatasetKind.ACTOR, surface, self._fetch_json, config)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PhoenixClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.request_timeout)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise PhoenixError("Client not initialized. Use 'async with PhoenixClient(...) as client:'")
        return self._transport

    async def _fetch_json(self, url: str) -> Any:
        return await self._require_transport().get_json(url)

    def _timeline(self, kind: DatasetKind) -> DatasetTimeline:
        return self.burn if kind == DatasetKind.BURN else self.actor

    # ------------------------------------------------------------------
    # Dataset selection
    # ------------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.burn.is_loading or self.actor.is_loading

    async def select(self, descriptor: DatasetDescriptor) -> tuple[Bucket, ...] | None:
        """Load *descriptor* into the timeline of its kind."""
        return await self._timeline(descriptor.kind).load(descriptor)

    async def select_burn(self, descriptor: DatasetDescriptor | None) -> tuple[Bucket, ...] | None:
        """Load a fire dataset, or clear the fire timeline when *descriptor* is ``None``."""
        if descriptor is None:
            self.burn.clear()
            return None
        return await self.burn.load(descriptor)

    async def select_actor(self, descriptor: DatasetDescriptor | None) -> tuple[Bucket, ...] | None:
        """Load a population dataset, or clear it when *descriptor* is ``None``."""
        if descriptor is None:
            self.actor.clear()
            return None
        return await self.actor.load(descriptor)

    def clear(self) -> None:
        """Remove every dataset from the surface."""
        self.burn.clear()
        self.actor.clear()

    def reload(self) -> None:
        """Recreate all layers of both timelines and restore their visibility."""
        self.burn.reload()
        self.actor.reload()

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def seek(self, target: int) -> None:
        """Move the shared playback pointer for both datasets."""
        self.burn.seek(target)
        self.actor.seek(target)

    def set_opacity(self, value: float) -> None:
        self.burn.set_opacity(value)

    def set_style(self, mode: StyleMode) -> None:
        self.burn.set_style(mode)

    def toggle_3d(self) -> StyleMode | None:
        return self.burn.toggle_3d()
