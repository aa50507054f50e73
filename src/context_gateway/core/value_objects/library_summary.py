from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LibrarySummary(BaseModel):
    """One entry of the backend's library search results."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str
    title: str = ""
    description: str = ""
    total_snippets: int | None = Field(default=None, alias="totalSnippets")
    trust_score: float | None = Field(default=None, alias="trustScore")
    benchmark_score: float | None = Field(default=None, alias="benchmarkScore")
    versions: list[str] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "LibrarySummary":
        return cls.model_validate(payload)
