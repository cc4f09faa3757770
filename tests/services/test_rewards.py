"""Tests for the bounded reward ledger."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from neko_relay.services.errors import InvalidDeltaError
from neko_relay.services.rewards import RewardLedger


def test_unknown_user_reads_zero() -> None:
    assert RewardLedger(1200).get("nobody") == 0


def test_add_accumulates_and_clamps() -> None:
    ledger = RewardLedger(1200)
    assert ledger.add("alice", 200) == 200
    assert ledger.add("alice", 0) == 200
    assert ledger.add("alice", 1000) == 1200
    assert ledger.add("alice", 50) == 1200
    assert ledger.get("alice") == 1200


def test_balances_are_per_user() -> None:
    ledger = RewardLedger(99999)
    ledger.add("alice", 150)
    ledger.add("bob", 50)
    assert ledger.get("alice") == 150
    assert ledger.get("bob") == 50


def test_negative_delta_is_rejected_without_side_effects() -> None:
    ledger = RewardLedger(1200)
    ledger.add("alice", 100)
    with pytest.raises(InvalidDeltaError):
        ledger.add("alice", -1)
    assert ledger.get("alice") == 100


def test_negative_cap_is_rejected() -> None:
    with pytest.raises(ValueError):
        RewardLedger(-1)


@pytest.mark.parametrize(
    ("deltas", "cap"),
    [
        ([50, 100, 150, 200] * 25, 99999),
        ([50, 100, 150, 200] * 25, 1200),
        ([1] * 500, 1200),
    ],
)
def test_concurrent_adds_never_lose_updates(deltas: list[int], cap: int) -> None:
    ledger = RewardLedger(cap)
    observed: list[int] = []
    observed_lock = threading.Lock()

    def grant(delta: int) -> None:
        balance = ledger.add("alice", delta)
        seen = ledger.get("alice")
        with observed_lock:
            observed.extend((balance, seen))

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(grant, deltas))

    assert ledger.get("alice") == min(sum(deltas), cap)
    assert max(observed) <= cap
