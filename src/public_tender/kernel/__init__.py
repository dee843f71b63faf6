"""
Kernel - Core event sourcing infrastructure

The kernel provides the machinery the tender domain builds upon: an
append-only event log, an injectable clock, the error taxonomy, structured
logging, metrics and per-tender locking.

Fun fact: Event sourcing was inspired by accountants - they never erase ledger
entries, they add correcting entries. Procurement auditors would approve.
"""

from public_tender.kernel.errors import (
    AlreadyExists,
    DeadlineViolation,
    EventStoreError,
    InvalidInput,
    InvalidState,
    NotFound,
    OfferNotFound,
    StreamVersionConflict,
    TenderNotFound,
    TenderSystemError,
    Unauthorized,
)
from public_tender.kernel.events import Event
from public_tender.kernel.ids import generate_id
from public_tender.kernel.policy import TenderPolicy
from public_tender.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # IDs
    "generate_id",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Events
    "Event",
    # Configuration
    "TenderPolicy",
    # Errors
    "TenderSystemError",
    "Unauthorized",
    "NotFound",
    "TenderNotFound",
    "OfferNotFound",
    "InvalidState",
    "InvalidInput",
    "DeadlineViolation",
    "AlreadyExists",
    "EventStoreError",
    "StreamVersionConflict",
]
