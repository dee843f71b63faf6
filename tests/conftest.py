"""
Pytest configuration and shared fixtures

Fun fact: The name "conftest" comes from pytest's configuration testing
framework. Files named conftest.py are automatically discovered and their
fixtures are available to all tests in the same directory and subdirectories!
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest

from public_tender.access.commands import AddEvaluator
from public_tender.access.handlers import AccessControlHandlers
from public_tender.access.projections import AccessControlList
from public_tender.kernel.event_store import SQLiteEventStore
from public_tender.kernel.policy import TenderPolicy
from public_tender.kernel.time import TestTimeProvider
from public_tender.system import TenderSystem
from public_tender.tender.handlers import TenderCommandHandlers
from public_tender.tender.projections import TenderRegistry
from tests.helpers import AUTHORITY, EVALUATOR


@pytest.fixture
def temp_db() -> Iterator[Path]:
    """Provide a temporary database file that's cleaned up after test"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "tenders.db"


@pytest.fixture
def event_store(temp_db: Path) -> SQLiteEventStore:
    """Provide a fresh event store for each test"""
    return SQLiteEventStore(temp_db)


@pytest.fixture
def test_time() -> TestTimeProvider:
    """
    Provide a controllable time provider for deterministic tests

    Default time: 2025-01-15 12:00:00 UTC. Tests move it past deadlines
    with advance_days().
    """
    return TestTimeProvider(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def policy() -> TenderPolicy:
    """Provide default tender policy for tests"""
    return TenderPolicy()


# =============================================================================
# Handler & Projection Fixtures
# =============================================================================


@pytest.fixture
def access_handlers(test_time: TestTimeProvider) -> AccessControlHandlers:
    """
    Provide access control handlers

    Handlers are stateless - they take projections as parameters.
    """
    return AccessControlHandlers(test_time)


@pytest.fixture
def tender_handlers(test_time: TestTimeProvider, policy: TenderPolicy) -> TenderCommandHandlers:
    """Provide tender command handlers"""
    return TenderCommandHandlers(test_time, policy)


@pytest.fixture
def acl(access_handlers: AccessControlHandlers) -> AccessControlList:
    """
    Provide an access control list with AUTHORITY assigned and EVALUATOR added
    """
    acl = AccessControlList()
    for event in access_handlers.handle_assign_authority(AUTHORITY, "cmd-init", acl):
        acl.apply_event(event)
    for event in access_handlers.handle_add_evaluator(
        AddEvaluator(address=EVALUATOR), "cmd-eval", AUTHORITY, acl
    ):
        acl.apply_event(event)
    return acl


@pytest.fixture
def tender_registry() -> TenderRegistry:
    """
    Provide fresh tender registry projection

    Rebuilt from events for each test - no shared state between tests.
    """
    return TenderRegistry()


# =============================================================================
# Façade Fixtures
# =============================================================================


@pytest.fixture
def system(temp_db: Path, test_time: TestTimeProvider) -> TenderSystem:
    """
    Provide a TenderSystem with AUTHORITY in charge and EVALUATOR registered
    """
    system = TenderSystem(temp_db, authority=AUTHORITY, time_provider=test_time)
    system.add_evaluator(AUTHORITY, EVALUATOR)
    return system
