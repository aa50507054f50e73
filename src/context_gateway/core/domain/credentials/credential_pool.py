"""Round-robin credential pool with temporary failure marking.

Credentials are parsed once at startup. Every selection advances the cursor;
rate-limited credentials are skipped until the cooldown elapses or every
credential has failed, in which case the failed set is cleared and the first
credential is handed out again so callers never starve.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable

import structlog

logger = structlog.get_logger()

DEFAULT_COOLDOWN_SECONDS: float = 60 * 60


def parse_credentials(source: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated string (or clean a list) into usable credentials."""
    if source is None:
        return []
    raw = source.split(",") if isinstance(source, str) else list(source)
    return [item.strip() for item in raw if item and item.strip()]


class CredentialPool:
    """Owns the credential sequence, the rotation cursor and the failed set.

    All state transitions happen under a single lock so concurrent calls see a
    consistent cursor and failed-set.
    """

    def __init__(
        self,
        credentials: Iterable[str] = (),
        *,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._credentials: tuple[str, ...] = tuple(parse_credentials(credentials))
        self._cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._cursor = 0
        self._failed: set[str] = set()
        self._last_reset = clock()
        self._lock = threading.Lock()

        if self._credentials:
            logger.info("Loaded API keys for rotation", key_count=len(self._credentials))
        else:
            logger.warning("No API keys provided. Running without authentication.")

    @classmethod
    def load(
        cls,
        source: str | Iterable[str] | None,
        *,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> "CredentialPool":
        """Build a pool from a comma-separated string or a list; empty input gives an empty pool."""
        return cls(parse_credentials(source), cooldown_seconds=cooldown_seconds, clock=clock)

    # ── Selection ──

    def next(self) -> str | None:
        """Return the next available credential, or None when the pool is empty."""
        with self._lock:
            if not self._credentials:
                return None
            self._reset_after_cooldown()

            size = len(self._credentials)
            for _ in range(size):
                candidate = self._credentials[self._cursor]
                self._cursor = (self._cursor + 1) % size
                if candidate not in self._failed:
                    return candidate

            logger.warning(
                "All API keys are rate-limited. Resetting failed keys and retrying",
                key_count=size,
            )
            self._failed.clear()
            return self._credentials[0]

    def mark_failed(self, credential: str | None) -> None:
        """Exclude a credential from selection until cooldown or full reset."""
        if not credential:
            return
        with self._lock:
            if credential not in self._credentials:
                return
            self._failed.add(credential)
            logger.warning(
                "API key marked as rate-limited",
                failed_count=len(self._failed),
                key_count=len(self._credentials),
            )

    def _reset_after_cooldown(self) -> None:
        now = self._clock()
        if now - self._last_reset > self._cooldown_seconds and self._failed:
            logger.info(
                "Resetting failed API keys after cooldown period",
                failed_count=len(self._failed),
            )
            self._failed.clear()
            self._last_reset = now

    # ── Read accessors ──

    def total_count(self) -> int:
        return len(self._credentials)

    def failed_count(self) -> int:
        with self._lock:
            return len(self._failed)

    def has_any(self) -> bool:
        return bool(self._credentials)

    def __contains__(self, credential: object) -> bool:
        return credential in self._credentials
