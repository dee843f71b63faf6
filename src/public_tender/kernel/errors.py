"""
Custom exceptions for Public Tender

Every rejected call surfaces one stable error kind plus a human-readable
reason. Callers branch on the exception class (or its ``kind``), operators
read the reason.

Fun fact: The first computer bug was an actual moth found in a relay
of the Harvard Mark II computer in 1947. Ours are mostly late offers.
"""


class TenderSystemError(Exception):
    """Base exception for all Public Tender errors"""

    kind: str = "Error"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


# ============================================================================
# Domain error taxonomy
# ============================================================================


class Unauthorized(TenderSystemError):
    """Caller does not hold the role the operation requires"""

    kind = "Unauthorized"

    def __init__(self, caller: str | None, operation: str, required_role: str) -> None:
        self.caller = caller
        self.operation = operation
        self.required_role = required_role
        super().__init__(
            f"{caller or '<anonymous>'} is not allowed to {operation} "
            f"(requires {required_role})"
        )


class NotFound(TenderSystemError):
    """Requested tender, offer or evaluator does not exist"""

    kind = "NotFound"


class TenderNotFound(NotFound):
    """Raised when tender does not exist"""

    def __init__(self, tender_id: int) -> None:
        self.tender_id = tender_id
        super().__init__(f"Tender {tender_id} not found")


class OfferNotFound(NotFound):
    """Raised when a provider has no offer on a tender"""

    def __init__(self, tender_id: int, provider: str) -> None:
        self.tender_id = tender_id
        self.provider = provider
        super().__init__(f"No offer from {provider} on tender {tender_id}")


class EvaluatorNotFound(NotFound):
    """Raised when removing an identity that is not an evaluator"""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"{address} is not an evaluator")


class InvalidState(TenderSystemError):
    """Operation invoked outside its lifecycle phase"""

    kind = "InvalidState"


class InvalidInput(TenderSystemError):
    """Malformed arguments: bad weights, zero price, empty strings, score out of range"""

    kind = "InvalidInput"


class DeadlineViolation(TenderSystemError):
    """Time-based precondition failed"""

    kind = "DeadlineViolation"


class AlreadyExists(TenderSystemError):
    """Duplicate offer or evaluator, or a one-shot operation run twice"""

    kind = "AlreadyExists"


# ============================================================================
# Storage errors
# ============================================================================


class EventStoreError(TenderSystemError):
    """Base class for event store errors"""

    kind = "EventStoreError"


class StreamVersionConflict(EventStoreError):
    """
    Raised when stream version doesn't match expected (optimistic locking)

    Per-tender locks make this unreachable within one process; it still guards
    two processes writing to the same database file.
    """

    kind = "StreamVersionConflict"

    def __init__(
        self, stream_id: str, expected_version: int, actual_version: int
    ) -> None:
        self.stream_id = stream_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Stream {stream_id} version mismatch: "
            f"expected {expected_version}, got {actual_version}"
        )
