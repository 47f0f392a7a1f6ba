"""Unit tests for the daily quota ledger."""

import random

import pytest

from joblens.contexts.analysis.quota_ledger import DAILY_LIMIT, QUOTA_KEY, QuotaLedger, QuotaStatus

DAY = "2024-05-01"
YESTERDAY = "2024-04-30"


@pytest.fixture
def ledger(store):
    return QuotaLedger(store, today=lambda: DAY)


@pytest.mark.unit
def test_fresh_status_is_full_and_not_written(ledger, store):
    assert ledger.status() == QuotaStatus(remaining=DAILY_LIMIT, total=DAILY_LIMIT, date=DAY)
    assert store.get_all() == {}


@pytest.mark.unit
def test_debit_until_exhausted(ledger, store):
    for expected_left in range(DAILY_LIMIT - 1, -1, -1):
        assert ledger.check_and_debit() is True
        assert ledger.status().remaining == expected_left

    assert ledger.check_and_debit() is False
    assert store.get(QUOTA_KEY) == {QUOTA_KEY: {"date": DAY, "remaining": 0}}


@pytest.mark.unit
def test_exhausted_debit_writes_nothing(store):
    """Test a refused debit leaves the stored record untouched."""
    store.set({QUOTA_KEY: {"date": DAY, "remaining": 0}})
    writes = []
    original_set = store.set
    store.set = lambda items: (writes.append(items), original_set(items))

    assert QuotaLedger(store, today=lambda: DAY).check_and_debit() is False
    assert writes == []


@pytest.mark.unit
def test_credit_restores_debit(ledger):
    ledger.check_and_debit()
    ledger.check_and_debit()
    ledger.credit()
    assert ledger.status().remaining == DAILY_LIMIT - 1


@pytest.mark.unit
def test_credit_never_exceeds_limit(ledger, store):
    store.set({QUOTA_KEY: {"date": DAY, "remaining": DAILY_LIMIT}})
    ledger.credit()
    assert ledger.status().remaining == DAILY_LIMIT


@pytest.mark.unit
def test_credit_without_todays_record_is_noop(ledger, store):
    ledger.credit()
    assert store.get_all() == {}

    store.set({QUOTA_KEY: {"date": YESTERDAY, "remaining": 3}})
    ledger.credit()
    assert store.get(QUOTA_KEY)[QUOTA_KEY] == {"date": YESTERDAY, "remaining": 3}


@pytest.mark.unit
def test_lazy_day_rollover(ledger, store):
    """Test yesterday's exhausted record reads as a full quota today."""
    store.set({QUOTA_KEY: {"date": YESTERDAY, "remaining": 0}})

    assert ledger.status().remaining == DAILY_LIMIT
    assert store.get(QUOTA_KEY)[QUOTA_KEY]["date"] == YESTERDAY

    assert ledger.check_and_debit() is True
    assert store.get(QUOTA_KEY)[QUOTA_KEY] == {"date": DAY, "remaining": DAILY_LIMIT - 1}


@pytest.mark.unit
def test_corrupt_record_is_clamped(ledger, store):
    store.set({QUOTA_KEY: {"date": DAY, "remaining": 999}})
    assert ledger.status().remaining == DAILY_LIMIT

    store.set({QUOTA_KEY: {"date": DAY, "remaining": -4}})
    assert ledger.status().remaining == 0

    store.set({QUOTA_KEY: {"date": DAY, "remaining": "lots"}})
    assert ledger.status().remaining == DAILY_LIMIT


@pytest.mark.unit
def test_remaining_stays_in_bounds(ledger):
    """Test any sequence of debits and credits keeps 0 <= remaining <= limit."""
    rng = random.Random(7)
    for _ in range(300):
        if rng.random() < 0.6:
            ledger.check_and_debit()
        else:
            ledger.credit()
        assert 0 <= ledger.status().remaining <= DAILY_LIMIT


@pytest.mark.unit
def test_custom_limit(store):
    ledger = QuotaLedger(store, daily_limit=2, today=lambda: DAY)
    assert ledger.check_and_debit()
    assert ledger.check_and_debit()
    assert not ledger.check_and_debit()
    assert ledger.status().to_dict() == {"remaining": 0, "total": 2, "date": DAY}
