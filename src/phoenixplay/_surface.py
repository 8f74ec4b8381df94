"""Rendering surface interface and an in-memory implementation."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from phoenixplay.exceptions import DuplicateRegistrationError, PhoenixError, ResourceNotFoundError


class RenderSurface(Protocol):
    """Structural interface of the map component that owns sources and layers.

    The engine never draws; it only hands descriptions and identifiers to
    an implementation of this protocol.
    """

    def create_source(self, source_id: str, collection: Mapping[str, Any]) -> None: ...

    def destroy_source(self, source_id: str) -> None: ...

    def create_layer(self, description: Mapping[str, Any], before_id: str | None = None) -> None: ...

    def destroy_layer(self, layer_id: str) -> None: ...

    def set_layer_visibility(self, layer_id: str, visible: bool) -> None: ...

    def set_layer_paint_property(self, layer_id: str, key: str, value: Any) -> None: ...


@dataclass(slots=True)
class SurfaceLayer:
    """A layer as held by :class:`InMemorySurface`."""

    description: dict[str, Any]
    before_id: str | None = None
    visible: bool = False
    paint_overrides: dict[str, Any] = field(default_factory=dict)


class InMemorySurface:
    """Headless surface that keeps sources and layers in dictionaries.

    Useful for exporting bucket layouts without a map and as the test
    double for the engine. Every call is appended to ``calls`` as
    ``(method, resource_id)`` so resource churn can be inspected.
    """

    def __init__(self) -> None:
        self.sources: dict[str, dict[str, Any]] = {}
        self.layers: dict[str, SurfaceLayer] = {}
        self.calls: list[tuple[str, str]] = []

    def _layer(self, layer_id: str) -> SurfaceLayer:
        layer = self.layers.get(layer_id)
        if layer is None:
            raise ResourceNotFoundError(f"Layer {layer_id!r} does not exist", resource_id=layer_id)
        return layer

    def create_source(self, source_id: str, collection: Mapping[str, Any]) -> None:
        if source_id in self.sources:
            raise DuplicateRegistrationError(f"Source {source_id!r} already exists")
        self.calls.append(("create_source", source_id))
        self.sources[source_id] = copy.deepcopy(dict(collection))

    def destroy_source(self, source_id: str) -> None:
        if source_id not in self.sources:
            raise ResourceNotFoundError(f"Source {source_id!r} does not exist", resource_id=source_id)
        if any(layer.description.get("sourceId") == source_id for layer in self.layers.values()):
            raise PhoenixError(f"Source {source_id!r} is still used by a layer")
        self.calls.append(("destroy_source", source_id))
        del self.sources[source_id]

    def create_layer(self, description: Mapping[str, Any], before_id: str | None = None) -> None:
        layer_id = str(description["id"])
        if layer_id in self.layers:
            raise DuplicateRegistrationError(f"Layer {layer_id!r} already exists")
        source_id = description.get("sourceId")
        if source_id not in self.sources:
            raise ResourceNotFoundError(f"Layer {layer_id!r} references unknown source {source_id!r}", resource_id=str(source_id))
        self.calls.append(("create_layer", layer_id))
        self.layers[layer_id] = SurfaceLayer(description=copy.deepcopy(dict(description)), before_id=before_id)

    def destroy_layer(self, layer_id: str) -> None:
        self._layer(layer_id)
        self.calls.append(("destroy_layer", layer_id))
        del self.layers[layer_id]

    def set_layer_visibility(self, layer_id: str, visible: bool) -> None:
        layer = self._layer(layer_id)
        self.calls.append(("set_layer_visibility", layer_id))
        layer.visible = visible

    def set_layer_paint_property(self, layer_id: str, key: str, value: Any) -> None:
        layer = self._layer(layer_id)
        self.calls.append(("set_layer_paint_property", layer_id))
        layer.paint_overrides[key] = value

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------

    def visible_layers(self) -> list[str]:
        return [layer_id for layer_id, layer in self.layers.items() if layer.visible]

    def paint_value(self, layer_id: str, key: str) -> Any:
        """Effective paint value: the latest override, else the description's."""
        layer = self._layer(layer_id)
        if key in layer.paint_overrides:
            return layer.paint_overrides[key]
        return layer.description.get("paint", {}).get(key)

    def count_calls(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)
