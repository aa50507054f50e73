from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class AttemptClassification(StrEnum):
    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_ERROR = "upstream_error"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True, slots=True)
class AttemptOutcome:
    """Record of a single outbound attempt within a logical call."""

    attempt: int
    classification: AttemptClassification
    credential: str | None = field(default=None, repr=False)
    status_code: int | None = None
    message: str | None = None

    @property
    def used_credential(self) -> bool:
        return self.credential is not None
