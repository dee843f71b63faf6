"""
Tests for kernel primitives: ids, time, errors, policy, locks
"""

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from public_tender.kernel.errors import (
    AlreadyExists,
    InvalidInput,
    NotFound,
    OfferNotFound,
    TenderNotFound,
    TenderSystemError,
    Unauthorized,
)
from public_tender.kernel.ids import generate_id, tender_stream_id
from public_tender.kernel.locks import TenderLockRegistry
from public_tender.kernel.policy import TenderPolicy
from public_tender.kernel.time import TestTimeProvider, deadline_after, offer_period_open


class TestIds:
    def test_generated_ids_are_unique(self) -> None:
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_generated_id_has_uuid_shape(self) -> None:
        parts = generate_id().split("-")
        assert [len(p) for p in parts] == [8, 4, 4, 4, 12]
        assert parts[2].startswith("7")

    def test_tender_stream_id(self) -> None:
        assert tender_stream_id(1) == "tender-1"
        assert tender_stream_id(42) == "tender-42"


class TestTimeProviderBehaviour:
    def test_advance(self) -> None:
        start = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
        clock = TestTimeProvider(start)

        clock.advance_days(2)
        clock.advance_seconds(30)

        assert clock.now() == start + timedelta(days=2, seconds=30)

    def test_set_time(self) -> None:
        clock = TestTimeProvider()
        target = datetime(2030, 6, 1, tzinfo=timezone.utc)
        clock.set_time(target)
        assert clock.now() == target


class TestDeadlines:
    def test_deadline_after_counts_units(self) -> None:
        start = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert deadline_after(start, 7) == datetime(2025, 1, 22, 12, 0, tzinfo=timezone.utc)
        assert deadline_after(start, 3, timedelta(hours=1)) == start + timedelta(hours=3)

    def test_offer_period_includes_deadline_instant(self) -> None:
        deadline = datetime(2025, 1, 22, 12, 0, tzinfo=timezone.utc)
        assert offer_period_open(deadline, deadline - timedelta(seconds=1))
        assert offer_period_open(deadline, deadline)
        assert not offer_period_open(deadline, deadline + timedelta(seconds=1))


class TestErrors:
    def test_every_error_has_kind_and_reason(self) -> None:
        error = InvalidInput("weights must sum to 100")
        assert isinstance(error, TenderSystemError)
        assert error.kind == "InvalidInput"
        assert error.reason == "weights must sum to 100"

    def test_not_found_family_shares_kind(self) -> None:
        assert TenderNotFound(3).kind == "NotFound"
        assert isinstance(OfferNotFound(3, "acme"), NotFound)
        assert "acme" in OfferNotFound(3, "acme").reason

    def test_unauthorized_names_operation_and_role(self) -> None:
        error = Unauthorized("mallory", "create_tender", "the authority role")
        assert error.kind == "Unauthorized"
        assert "mallory" in error.reason
        assert "create_tender" in error.reason
        assert "authority" in error.reason

    def test_already_exists_kind(self) -> None:
        assert AlreadyExists("dup").kind == "AlreadyExists"


class TestPolicy:
    def test_defaults(self) -> None:
        policy = TenderPolicy()
        assert policy.score_scale == 100
        assert policy.deadline_unit == timedelta(days=1)

    def test_policy_is_frozen(self) -> None:
        policy = TenderPolicy()
        with pytest.raises(ValidationError):
            policy.score_scale = 10

    def test_score_scale_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TenderPolicy(score_scale=0)


class TestTenderLocks:
    def test_register_is_idempotent(self) -> None:
        locks = TenderLockRegistry()
        locks.register(1)
        first = locks._lookup(1)
        locks.register(1)
        locks.register(2)

        assert locks._lookup(1) is first
        assert locks._lookup(2) is not first
        assert len(locks) == 2

    def test_unknown_ids_do_not_grow_registry(self) -> None:
        locks = TenderLockRegistry()
        for tender_id in (10**9, -1, 42):
            with locks.for_tender(tender_id):
                pass
        assert len(locks) == 0

    def test_unknown_id_holds_creation_lock(self) -> None:
        locks = TenderLockRegistry()
        entered = threading.Event()

        def create() -> None:
            with locks.creation_lock:
                entered.set()

        with locks.for_tender(5):
            thread = threading.Thread(target=create)
            thread.start()
            assert not entered.wait(timeout=0.05)
        thread.join()
        assert entered.is_set()

    def test_lock_is_reentrant(self) -> None:
        locks = TenderLockRegistry()
        locks.register(1)
        with locks.for_tender(1):
            with locks.for_tender(1):
                pass

    def test_same_tender_serializes(self) -> None:
        """Two blocks on one tender never overlap"""
        locks = TenderLockRegistry()
        locks.register(7)
        active = []
        overlaps = []

        def worker() -> None:
            with locks.for_tender(7):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []

    def test_different_tenders_do_not_block(self) -> None:
        locks = TenderLockRegistry()
        locks.register(1)
        locks.register(2)
        acquired = threading.Event()

        def other() -> None:
            with locks.for_tender(2):
                acquired.set()

        with locks.for_tender(1):
            thread = threading.Thread(target=other)
            thread.start()
            assert acquired.wait(timeout=2.0)
            thread.join()
