"""Dataset descriptor model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from phoenixplay._constants import hhmm_to_minutes
from phoenixplay.ingestion.normalize import clean_str


class DatasetKind(StrEnum):
    BURN = "burn"
    ACTOR = "actor"


class DatasetDescriptor(BaseModel):
    """Catalogue entry describing one selectable dataset.

    Fields accept the catalogue's own key names (``file`` for fires,
    ``data`` for population plans) as aliases of ``url``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: str = Field(..., validation_alias=AliasChoices("id", "name"))
    kind: DatasetKind
    url: str = Field(..., validation_alias=AliasChoices("url", "file", "data"))
    ignition_hhmm: str | None = Field(default=None, validation_alias=AliasChoices("ignition_hhmm", "ignitionHhmm"))
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        text = clean_str(value)
        if text is None:
            raise ValueError("dataset id must be non-empty")
        return text

    @field_validator("ignition_hhmm", mode="before")
    @classmethod
    def _validate_hhmm(cls, value: Any) -> str | None:
        text = clean_str(value)
        if text is None:
            return None
        hhmm_to_minutes(text)
        return text

    @property
    def ignition_minutes(self) -> int:
        """Scenario start in minutes since midnight, ``0`` when unknown."""
        if self.ignition_hhmm is None:
            return 0
        return hhmm_to_minutes(self.ignition_hhmm)
