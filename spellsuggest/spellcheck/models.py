from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CorrectionType(str, Enum):
    EXTRA_LETTER = "extra_letter"
    TYPO = "typo"
    PHONETIC = "phonetic"
    NONE = "none"


class CorrectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    needs_correction: bool
    suggestion: str | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    correction_type: CorrectionType = CorrectionType.NONE

    @classmethod
    def no_correction(cls) -> "CorrectionResult":
        return cls(needs_correction=False)


class Document(BaseModel):
    """Read-only view of a corpus record (typically a product)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None
    platform: str | None = None
    category: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    product_type: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple)):
            names = []
            for tag in value:
                if isinstance(tag, dict):
                    tag = tag.get("name")
                if isinstance(tag, str) and tag:
                    names.append(tag)
            return tuple(names)
        return value

    def field_text(self, field_name: str) -> str | None:
        if field_name == "tags":
            return " ".join(self.tags) or None
        value = getattr(self, field_name, None)
        return value if isinstance(value, str) and value else None


class CacheEntryInfo(BaseModel):
    query: str
    suggestion: str | None
    confidence: float
    correction_type: CorrectionType
    age_s: float


class CacheStats(BaseModel):
    size: int
    entries: list[CacheEntryInfo]
