"""Base model shared by phoenixplay descriptions.

Every model emitted to the rendering surface inherits from
:class:`PhoenixModel`, which provides:

* ``alias_generator=to_camel`` so snake_case fields dump to the camelCase
  keys the surface expects (``source_id`` -> ``sourceId``).
* ``to_surface()``, dumping by alias with ``None`` fields omitted so
  optional keys such as ``filter`` disappear instead of serialising as null.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PhoenixModel(BaseModel):
    """Base for models handed across the rendering-surface boundary."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_surface(self) -> dict[str, Any]:
        """Dump with camelCase keys, dropping unset optional keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
