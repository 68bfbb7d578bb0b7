from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import PLACEHOLDER, PLACEHOLDER_IMAGE_URL


class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"
    STALE = "STALE"
    FALLBACK = "FALLBACK"


class CanonicalRecord(BaseModel):
    """One device entry, independent of the source it was read from."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(min_length=1)
    brand: str = PLACEHOLDER
    price: str = PLACEHOLDER
    release_year: str = Field(default=PLACEHOLDER, alias="releaseYear")
    performance_score: str = Field(default=PLACEHOLDER, alias="performanceScore")
    image_url: str = Field(default=PLACEHOLDER_IMAGE_URL, alias="imageURL")
    additional_data: Dict[str, str] = Field(default_factory=dict, alias="additionalData")

    @field_validator("image_url", mode="before")
    @classmethod
    def _image_url_never_empty(cls, value: Optional[str]) -> str:
        if value is None or not str(value).strip():
            return PLACEHOLDER_IMAGE_URL
        return value

    @field_validator("additional_data", mode="before")
    @classmethod
    def _drop_empty_values(cls, value: Optional[Dict[str, str]]) -> Dict[str, str]:
        if not value:
            return {}
        return {k: v for k, v in value.items() if v != ""}

    @property
    def identity(self) -> tuple[str, str]:
        return (self.name, self.brand)


@dataclass(frozen=True)
class RawRow:
    """Positional cell texts of one table row, before normalization."""

    fields: List[str]
    position: int
    image_ref: Optional[str] = None

    def cell(self, index: int) -> str:
        return self.fields[index] if index < len(self.fields) else ""


@dataclass(frozen=True)
class Table:
    headers: List[str]
    rows: List[RawRow] = field(default_factory=list)


class ColumnsResponse(BaseModel):
    columns: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
