from __future__ import annotations

from dataclasses import dataclass

from context_gateway.core.value_objects.attempt_outcome import AttemptOutcome
from context_gateway.core.value_objects.dispatch_status import DispatchStatus


@dataclass(frozen=True, slots=True)
class ContextResult:
    """Documentation text, or a diagnostic when ``status`` is not SUCCEEDED."""

    data: str
    status: DispatchStatus = DispatchStatus.SUCCEEDED
    attempts: tuple[AttemptOutcome, ...] = ()
