from __future__ import annotations

from dataclasses import dataclass

from context_gateway.core.value_objects.attempt_outcome import AttemptOutcome
from context_gateway.core.value_objects.dispatch_status import DispatchStatus
from context_gateway.core.value_objects.library_summary import LibrarySummary


@dataclass(frozen=True, slots=True)
class SearchResult:
    results: tuple[LibrarySummary, ...] = ()
    error: str | None = None
    status: DispatchStatus = DispatchStatus.SUCCEEDED
    attempts: tuple[AttemptOutcome, ...] = ()

    @property
    def has_results(self) -> bool:
        return len(self.results) > 0
