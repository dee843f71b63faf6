"""
Test Helper Functions - Builders

Reusable builders that drive tenders through their lifecycle so each test
can start from the phase it cares about.

Fun fact: The Builder pattern was formalized by the Gang of Four in 1994,
but test data builders were popularized by the growing programmer test
movement in the 2000s - we use them to keep tests readable!
"""

from typing import Any

from public_tender.kernel.events import Event
from public_tender.kernel.time import TestTimeProvider
from public_tender.system import TenderSystem
from public_tender.tender.models import Tender

AUTHORITY = "city-hall"
EVALUATOR = "eva"


def apply_all(projection: Any, events: list[Event]) -> list[Event]:
    """Fold events into a projection, returning them for further checks"""
    for event in events:
        projection.apply_event(event)
    return events


def create_tender(
    system: TenderSystem,
    description: str = "Road resurfacing, district 4",
    max_price: int = 1000,
    deadline_days: int = 7,
    weight_price: int = 60,
    weight_quality: int = 40,
) -> Tender:
    """Builder for an OPEN tender created by AUTHORITY"""
    return system.create_tender(
        AUTHORITY, description, max_price, deadline_days, weight_price, weight_quality
    )


def create_closed_tender(
    system: TenderSystem,
    test_time: TestTimeProvider,
    offers: list[tuple[str, int]],
    **tender_fields: Any,
) -> Tender:
    """
    Builder for a CLOSED tender

    Args:
        offers: (provider, price) pairs, submitted in this order
        **tender_fields: Overrides for create_tender()
    """
    tender = create_tender(system, **tender_fields)
    for provider, price in offers:
        system.submit_offer(provider, tender.tender_id, price, f"docs://{provider}")
    test_time.advance_days(tender_fields.get("deadline_days", 7) + 1)
    return system.close_offer_period(AUTHORITY, tender.tender_id)


def create_evaluated_tender(
    system: TenderSystem,
    test_time: TestTimeProvider,
    offers: list[tuple[str, int, int]],
    **tender_fields: Any,
) -> Tender:
    """
    Builder for an EVALUATED tender

    Args:
        offers: (provider, price, quality_score) triples in submission order
        **tender_fields: Overrides for create_tender()
    """
    tender = create_closed_tender(
        system, test_time, [(p, price) for p, price, _ in offers], **tender_fields
    )
    for provider, _, score in offers:
        system.evaluate_offer(EVALUATOR, tender.tender_id, provider, score)
    return system.mark_as_evaluated(AUTHORITY, tender.tender_id)
