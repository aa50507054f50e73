from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ClientIdentity:
    """Name and version of the calling agent client (e.g. an IDE)."""

    name: str | None = None
    version: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.version
