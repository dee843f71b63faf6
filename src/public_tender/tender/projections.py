"""
Tender Projections

Event-sourced read model of every tender, its participants and its offers,
folded from the 'tender-<n>' streams. Payload timestamps arrive as ISO
strings and are parsed back into datetimes here.

Fun fact: Tender boxes in 19th century town halls had two locks, one key
held by the clerk and one by the mayor. Our lock count is per tender.
"""

from datetime import datetime
from typing import Any

from pydantic import TypeAdapter

from public_tender.kernel.events import Event
from public_tender.tender.models import TenderStatus

_datetime_adapter = TypeAdapter(datetime)


def _parse_dt(value: Any) -> datetime | None:
    if value is None:
        return None
    return _datetime_adapter.validate_python(value)


class TenderRegistry:
    """
    Tender registry projection

    Tracks tenders, their participant lists (submission order) and offers
    keyed by (tender_id, provider). Rebuilt from TenderCreated,
    OfferSubmitted, OfferPeriodClosed, OfferEvaluated, TenderEvaluated and
    WinnerCalculated events.
    """

    def __init__(self) -> None:
        self.tenders: dict[int, dict[str, Any]] = {}
        self.offers: dict[tuple[int, str], dict[str, Any]] = {}
        self._participants: dict[int, list[str]] = {}

    def apply_event(self, event: Event) -> None:
        """
        Apply event to update projection

        Args:
            event: Event to apply
        """
        if event.event_type == "TenderCreated":
            self._apply_tender_created(event)
        elif event.event_type == "OfferSubmitted":
            self._apply_offer_submitted(event)
        elif event.event_type == "OfferPeriodClosed":
            self._apply_offer_period_closed(event)
        elif event.event_type == "OfferEvaluated":
            self._apply_offer_evaluated(event)
        elif event.event_type == "TenderEvaluated":
            self._apply_tender_evaluated(event)
        elif event.event_type == "WinnerCalculated":
            self._apply_winner_calculated(event)

    def _apply_tender_created(self, event: Event) -> None:
        payload = event.payload
        tender_id = payload["tender_id"]
        self.tenders[tender_id] = {
            "tender_id": tender_id,
            "creator": payload["creator"],
            "description": payload["description"],
            "max_price": payload["max_price"],
            "deadline": _parse_dt(payload["deadline"]),
            "weight_price": payload["weight_price"],
            "weight_quality": payload["weight_quality"],
            "status": TenderStatus.OPEN,
            "winner": None,
            "participant_count": 0,
            "created_at": _parse_dt(payload["created_at"]),
            "closed_at": None,
            "evaluated_at": None,
            "finalized_at": None,
            "version": event.version,
        }
        self._participants[tender_id] = []

    def _apply_offer_submitted(self, event: Event) -> None:
        """Store the offer and append its provider in one step"""
        payload = event.payload
        tender_id = payload["tender_id"]
        if tender_id not in self.tenders:
            return

        provider = payload["provider"]
        self.offers[(tender_id, provider)] = {
            "tender_id": tender_id,
            "provider": provider,
            "price": payload["price"],
            "documentation": payload["documentation"],
            "quality_score": 0,
            "evaluated": False,
            "exist": True,
            "submitted_at": _parse_dt(payload["submitted_at"]),
            "evaluated_by": None,
        }
        self._participants[tender_id].append(provider)
        tender = self.tenders[tender_id]
        tender["participant_count"] = len(self._participants[tender_id])
        tender["version"] = event.version

    def _apply_offer_period_closed(self, event: Event) -> None:
        payload = event.payload
        tender = self.tenders.get(payload["tender_id"])
        if tender is None:
            return
        tender["status"] = TenderStatus.CLOSED
        tender["closed_at"] = _parse_dt(payload["closed_at"])
        tender["version"] = event.version

    def _apply_offer_evaluated(self, event: Event) -> None:
        payload = event.payload
        tender_id = payload["tender_id"]
        offer = self.offers.get((tender_id, payload["provider"]))
        if offer is None:
            return
        offer["quality_score"] = payload["quality_score"]
        offer["evaluated"] = True
        offer["evaluated_by"] = payload["evaluated_by"]
        self.tenders[tender_id]["version"] = event.version

    def _apply_tender_evaluated(self, event: Event) -> None:
        payload = event.payload
        tender = self.tenders.get(payload["tender_id"])
        if tender is None:
            return
        tender["status"] = TenderStatus.EVALUATED
        tender["evaluated_at"] = _parse_dt(payload["evaluated_at"])
        tender["version"] = event.version

    def _apply_winner_calculated(self, event: Event) -> None:
        payload = event.payload
        tender = self.tenders.get(payload["tender_id"])
        if tender is None:
            return
        tender["status"] = TenderStatus.FINALIZED
        tender["winner"] = payload["winner"]
        tender["finalized_at"] = _parse_dt(payload["finalized_at"])
        tender["version"] = event.version

    # Queries

    def get(self, tender_id: int) -> dict[str, Any] | None:
        """Get tender by id"""
        return self.tenders.get(tender_id)

    def version(self, tender_id: int) -> int:
        """Current stream version of the tender (0 if unknown)"""
        tender = self.tenders.get(tender_id)
        return tender["version"] if tender else 0

    def participants(self, tender_id: int) -> list[str]:
        """Providers in submission order (copy)"""
        return list(self._participants.get(tender_id, []))

    def get_offer(self, tender_id: int, provider: str) -> dict[str, Any] | None:
        return self.offers.get((tender_id, provider))

    def offers_for(self, tender_id: int) -> list[dict[str, Any]]:
        """Offers of a tender in submission order"""
        return [
            self.offers[(tender_id, provider)]
            for provider in self._participants.get(tender_id, [])
        ]

    def count(self) -> int:
        return len(self.tenders)

    def next_id(self) -> int:
        """Ids are sequential from 1 and never reused"""
        return len(self.tenders) + 1

    def tender_ids(self) -> list[int]:
        """Every tender id in creation order"""
        return sorted(self.tenders)

    def counts_by_status(self) -> dict[str, int]:
        """Number of tenders in each lifecycle state (every state present)"""
        counts = {status.value: 0 for status in TenderStatus}
        for tender in self.tenders.values():
            counts[tender["status"].value] += 1
        return counts
