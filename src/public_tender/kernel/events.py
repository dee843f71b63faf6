"""
Base Event model for event sourcing

Events are immutable facts about what happened to a tender or to the access
control list. They form the append-only log that every read model is folded
from - tenders and offers are never deleted, only added to.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Event(BaseModel):
    """
    Base event class - every state change is recorded as one of these

    The combination of stream_id + version provides optimistic locking,
    while command_id ties each event back to the call that caused it.
    """

    event_id: str = Field(
        ...,
        description="Unique event identifier (UUIDv7 for time-ordering)",
    )

    stream_id: str = Field(
        ...,
        description="Aggregate identifier: 'tender-<n>' or 'access-control'",
    )

    stream_type: str = Field(
        ...,
        description="Type of aggregate: 'Tender' or 'AccessControl'",
    )

    event_type: str = Field(
        ...,
        description="Specific event type: 'TenderCreated', 'OfferSubmitted', etc.",
    )

    occurred_at: datetime = Field(
        ...,
        description="UTC timestamp when event occurred",
    )

    actor_id: str | None = Field(
        default=None,
        description="Identity that triggered this event (None for system events)",
    )

    command_id: str = Field(
        ...,
        description="ID of the call that caused this event",
    )

    payload: dict = Field(
        default_factory=dict,
        description="Event-specific data (must be JSON-serializable)",
    )

    version: int = Field(
        ...,
        description="Stream version after this event (monotonically increasing)",
        ge=1,
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "event_id": "01908e9a-3b87-7000-8000-123456789abc",
                    "stream_id": "tender-1",
                    "stream_type": "Tender",
                    "event_type": "OfferSubmitted",
                    "occurred_at": "2025-01-15T10:30:00Z",
                    "actor_id": "provider-a",
                    "command_id": "01908e9a-3b87-7000-8000-0000000000aa",
                    "payload": {"tender_id": 1, "provider": "provider-a", "price": 500},
                    "version": 2,
                }
            ]
        },
    }


def create_event(
    *,
    event_id: str,
    stream_id: str,
    stream_type: str,
    event_type: str,
    occurred_at: datetime,
    command_id: str,
    version: int,
    actor_id: str | None = None,
    payload: dict | None = None,
) -> Event:
    """Factory function for creating events with all required fields"""
    return Event(
        event_id=event_id,
        stream_id=stream_id,
        stream_type=stream_type,
        event_type=event_type,
        occurred_at=occurred_at,
        actor_id=actor_id,
        command_id=command_id,
        payload=payload or {},
        version=version,
    )
