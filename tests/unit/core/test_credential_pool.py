from collections import Counter
from concurrent.futures import ThreadPoolExecutor

from context_gateway.core.domain.credentials.credential_pool import (
    DEFAULT_COOLDOWN_SECONDS,
    CredentialPool,
    parse_credentials,
)


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_parse_credentials_trims_and_drops_empty_entries():
    assert parse_credentials(" k1 , ,k2,, k3 ") == ["k1", "k2", "k3"]
    assert parse_credentials(["", "  ", "k1"]) == ["k1"]
    assert parse_credentials(None) == []
    assert parse_credentials("") == []


def test_empty_pool_yields_no_credential():
    pool = CredentialPool.load(None)

    assert pool.next() is None
    assert not pool.has_any()
    assert pool.total_count() == 0


def test_load_from_comma_separated_string():
    pool = CredentialPool.load("k1, k2 ,")

    assert pool.total_count() == 2
    assert "k1" in pool
    assert "k3" not in pool


def test_next_rotates_round_robin():
    pool = CredentialPool(["k1", "k2", "k3"])

    assert [pool.next() for _ in range(5)] == ["k1", "k2", "k3", "k1", "k2"]


def test_failed_credential_is_skipped():
    pool = CredentialPool(["k1", "k2", "k3"])
    assert pool.next() == "k1"

    pool.mark_failed("k1")

    assert [pool.next() for _ in range(3)] == ["k2", "k3", "k2"]
    assert pool.failed_count() == 1


def test_all_failed_resets_and_returns_first():
    pool = CredentialPool(["k1", "k2"])
    pool.mark_failed("k1")
    pool.mark_failed("k2")

    assert pool.next() == "k1"
    assert pool.failed_count() == 0


def test_mark_failed_ignores_unknown_and_missing_credentials():
    pool = CredentialPool(["k1"])

    pool.mark_failed(None)
    pool.mark_failed("")
    pool.mark_failed("not-in-pool")

    assert pool.failed_count() == 0


def test_failed_set_clears_after_cooldown():
    clock = FakeClock()
    pool = CredentialPool(["k1", "k2"], clock=clock)
    pool.mark_failed("k1")

    clock.now = 100
    assert [pool.next(), pool.next()] == ["k2", "k2"]

    clock.now = DEFAULT_COOLDOWN_SECONDS + 1
    assert pool.next() == "k1"
    assert pool.failed_count() == 0


def test_cooldown_does_not_clear_before_it_elapses():
    clock = FakeClock()
    pool = CredentialPool(["k1", "k2"], cooldown_seconds=10, clock=clock)
    pool.mark_failed("k2")

    clock.now = 10
    pool.next()

    assert pool.failed_count() == 1


def test_concurrent_selection_is_balanced():
    pool = CredentialPool(["k1", "k2", "k3"])

    with ThreadPoolExecutor(max_workers=8) as executor:
        picks = list(executor.map(lambda _: pool.next(), range(300)))

    assert Counter(picks) == {"k1": 100, "k2": 100, "k3": 100}
