"""
TenderSystem - Main façade class

This is the primary interface to the procurement tender workflow. It hides
event sourcing, projections, locking and command handling behind one call
per operation.

Example:
    >>> from public_tender import TenderSystem
    >>> system = TenderSystem("tenders.db", authority="city-hall")
    >>> system.add_evaluator("city-hall", "eva")
    >>> tender = system.create_tender("city-hall", "Road repair", 1000, 7, 60, 40)
    >>> system.submit_offer("acme", tender.tender_id, 900, "ipfs://acme-offer")
    >>> # ... after the deadline ...
    >>> system.close_offer_period("city-hall", tender.tender_id)
    >>> system.evaluate_offer("eva", tender.tender_id, "acme", 85)
    >>> system.mark_as_evaluated("city-hall", tender.tender_id)
    >>> system.calculate_winner("city-hall", tender.tender_id).winner
    'acme'
"""

from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from public_tender.access.commands import (
    AddEvaluator,
    RemoveEvaluator,
    RenounceAuthority,
    TransferAuthority,
)
from public_tender.access.handlers import AccessControlHandlers
from public_tender.access.invariants import authorize
from public_tender.access.models import AccessSnapshot, Operation
from public_tender.access.projections import AccessControlList
from public_tender.kernel.errors import InvalidInput
from public_tender.kernel.event_store import SQLiteEventStore
from public_tender.kernel.events import Event
from public_tender.kernel.ids import generate_id, tender_stream_id
from public_tender.kernel.locks import TenderLockRegistry
from public_tender.kernel.logging import LogOperation, get_logger
from public_tender.kernel.metrics import (
    offers_evaluated_total,
    offers_submitted_total,
    track_command_duration,
    update_tender_status_metrics,
    winners_selected_total,
)
from public_tender.kernel.policy import TenderPolicy
from public_tender.kernel.time import RealTimeProvider, TimeProvider
from public_tender.tender import invariants as tender_invariants
from public_tender.tender.commands import (
    CalculateWinner,
    CloseOfferPeriod,
    CreateTender,
    EvaluateOffer,
    MarkAsEvaluated,
    SubmitOffer,
)
from public_tender.tender.handlers import TenderCommandHandlers
from public_tender.tender.models import Offer, OffersView, Tender, TenderStatus
from public_tender.tender.projections import TenderRegistry
from public_tender.tender.scoring import score_offer

logger = get_logger(__name__)

C = TypeVar("C", bound=BaseModel)


def _build_command(command_cls: type[C], **fields: Any) -> C:
    """Construct a command, reporting malformed arguments as InvalidInput"""
    try:
        return command_cls(**fields)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise InvalidInput(f"{field}: {first['msg']}") from e


class TenderSystem:
    """
    Public Tender main façade

    Provides a unified API for:
    - Authority and evaluator management
    - Tender lifecycle (create, close, mark evaluated, calculate winner)
    - Offer submission and evaluation
    - Read-only snapshots and the per-tender audit trail

    Every mutation holds the lock of the tender it touches, validates
    against the projections, appends the resulting events and only then
    folds them into the projections. A rejected call leaves no trace.
    """

    def __init__(
        self,
        sqlite_path: str | Path,
        authority: str | None = None,
        policy: TenderPolicy | None = None,
        time_provider: TimeProvider | None = None,
    ) -> None:
        """
        Initialize the tender system

        Args:
            sqlite_path: Path to SQLite database
            authority: Initial authority for a fresh database (ignored once
                the database has one; defaults to policy.default_authority)
            policy: Tender policy (uses defaults if None)
            time_provider: Time provider (uses real time if None)
        """
        self.sqlite_path = Path(sqlite_path)
        self.policy = policy or TenderPolicy()
        self.time_provider = time_provider or RealTimeProvider()

        # Initialize infrastructure
        self.event_store = SQLiteEventStore(self.sqlite_path)
        self.locks = TenderLockRegistry()
        self.access_handlers = AccessControlHandlers(self.time_provider)
        self.tender_handlers = TenderCommandHandlers(self.time_provider, self.policy)

        # Initialize projections
        self.acl = AccessControlList()
        self.tender_registry = TenderRegistry()

        # Rebuild projections from event store
        self._rebuild_projections()
        self._ensure_authority(authority or self.policy.default_authority)
        update_tender_status_metrics(self.tender_registry.counts_by_status())

    def _rebuild_projections(self) -> None:
        """Rebuild all projections from event store"""
        all_events = self.event_store.load_all_events()
        for event in all_events:
            self._apply(event)
        logger.info(
            "Projections rebuilt",
            events=len(all_events),
            tenders=self.tender_registry.count(),
            evaluators=len(self.acl.evaluators),
        )

    def _apply(self, event: Event) -> None:
        if event.stream_type == "AccessControl":
            self.acl.apply_event(event)
        elif event.stream_type == "Tender":
            if event.event_type == "TenderCreated":
                self.locks.register(event.payload["tender_id"])
            self.tender_registry.apply_event(event)

    def _commit(self, events: list[Event]) -> None:
        """Append events to their stream, then fold them into projections"""
        if not events:
            return
        self.event_store.append(events[0].stream_id, events[0].version - 1, events)
        for event in events:
            self._apply(event)

    def _ensure_authority(self, authority: str) -> None:
        with self.locks.access_lock:
            events = self.access_handlers.handle_assign_authority(
                authority, generate_id(), self.acl
            )
            self._commit(events)
        if events:
            logger.info("Authority assigned", authority=self.acl.authority)

    def _refresh_status_metrics(self) -> None:
        update_tender_status_metrics(self.tender_counts_by_status())

    # Access control

    @track_command_duration("AddEvaluator")
    def add_evaluator(self, caller: str, address: str) -> list[str]:
        """
        Register an evaluator (authority only)

        Returns:
            Evaluator identities after the change
        """
        command = _build_command(AddEvaluator, address=address)
        with LogOperation(logger, "add_evaluator", caller=caller, address=address):
            with self.locks.access_lock:
                events = self.access_handlers.handle_add_evaluator(
                    command, generate_id(), caller, self.acl
                )
                self._commit(events)
                return self.acl.list_evaluators()

    @track_command_duration("RemoveEvaluator")
    def remove_evaluator(self, caller: str, address: str) -> list[str]:
        """Revoke an evaluator (authority only); scores already given stand"""
        command = _build_command(RemoveEvaluator, address=address)
        with LogOperation(logger, "remove_evaluator", caller=caller, address=address):
            with self.locks.access_lock:
                events = self.access_handlers.handle_remove_evaluator(
                    command, generate_id(), caller, self.acl
                )
                self._commit(events)
                return self.acl.list_evaluators()

    @track_command_duration("TransferAuthority")
    def transfer_authority(self, caller: str, new_authority: str) -> AccessSnapshot:
        command = _build_command(TransferAuthority, new_authority=new_authority)
        with LogOperation(
            logger, "transfer_authority", caller=caller, new_authority=new_authority
        ):
            with self.locks.access_lock:
                events = self.access_handlers.handle_transfer_authority(
                    command, generate_id(), caller, self.acl
                )
                self._commit(events)
                return self.acl.snapshot()

    @track_command_duration("RenounceAuthority")
    def renounce_authority(self, caller: str) -> AccessSnapshot:
        """
        Give up the authority role for good

        Afterwards no identity holds it, so every authority operation fails
        with Unauthorized.
        """
        with LogOperation(logger, "renounce_authority", caller=caller):
            with self.locks.access_lock:
                events = self.access_handlers.handle_renounce_authority(
                    RenounceAuthority(), generate_id(), caller, self.acl
                )
                self._commit(events)
                return self.acl.snapshot()

    def authorize(self, caller: str | None, operation: Operation) -> None:
        """
        Check caller may perform operation

        Raises:
            Unauthorized: If caller lacks the required role
        """
        authorize(self.acl, caller, operation)

    def is_evaluator(self, address: str) -> bool:
        return self.acl.is_evaluator(address)

    def list_evaluators(self) -> list[str]:
        with self.locks.access_lock:
            return self.acl.list_evaluators()

    def current_authority(self) -> str | None:
        """Current authority identity, None once renounced"""
        return self.acl.authority

    def access_snapshot(self) -> AccessSnapshot:
        with self.locks.access_lock:
            return self.acl.snapshot()

    # Tender lifecycle

    @track_command_duration("CreateTender")
    def create_tender(
        self,
        caller: str,
        description: str,
        max_price: int,
        deadline_days: int,
        weight_price: int,
        weight_quality: int,
    ) -> Tender:
        """
        Publish a new tender (authority only)

        Args:
            caller: Identity performing the call
            description: What is being procured
            max_price: Highest acceptable offer price
            deadline_days: Offer period length in deadline units (days)
            weight_price: Weight of the price score
            weight_quality: Weight of the quality score

        Returns:
            The new OPEN tender
        """
        command = _build_command(
            CreateTender,
            description=description,
            max_price=max_price,
            deadline_days=deadline_days,
            weight_price=weight_price,
            weight_quality=weight_quality,
        )
        with LogOperation(
            logger, "create_tender", caller=caller, max_price=max_price,
            deadline_days=deadline_days,
        ) as op:
            with self.locks.creation_lock:
                events = self.tender_handlers.handle_create_tender(
                    command, generate_id(), caller, self.acl, self.tender_registry
                )
                self._commit(events)
            tender_id = events[0].payload["tender_id"]
            op.context["tender_id"] = tender_id
        self._refresh_status_metrics()
        return self.get_tender(tender_id)

    @track_command_duration("CloseOfferPeriod")
    def close_offer_period(self, caller: str, tender_id: int) -> Tender:
        """End the offer period of a tender whose deadline has passed"""
        command = _build_command(CloseOfferPeriod, tender_id=tender_id)
        with LogOperation(
            logger, "close_offer_period", caller=caller, tender_id=command.tender_id
        ):
            with self.locks.for_tender(command.tender_id):
                events = self.tender_handlers.handle_close_offer_period(
                    command, generate_id(), caller, self.acl, self.tender_registry
                )
                self._commit(events)
                tender = self._tender_snapshot(command.tender_id)
        self._refresh_status_metrics()
        return tender

    @track_command_duration("MarkAsEvaluated")
    def mark_as_evaluated(self, caller: str, tender_id: int) -> Tender:
        """Confirm every participant's offer is scored (CLOSED → EVALUATED)"""
        command = _build_command(MarkAsEvaluated, tender_id=tender_id)
        with LogOperation(
            logger, "mark_as_evaluated", caller=caller, tender_id=command.tender_id
        ):
            with self.locks.for_tender(command.tender_id):
                events = self.tender_handlers.handle_mark_as_evaluated(
                    command, generate_id(), caller, self.acl, self.tender_registry
                )
                self._commit(events)
                tender = self._tender_snapshot(command.tender_id)
        self._refresh_status_metrics()
        return tender

    @track_command_duration("CalculateWinner")
    def calculate_winner(self, caller: str, tender_id: int) -> Tender:
        """
        Compute and commit the winner (EVALUATED → FINALIZED)

        Returns:
            The finalized tender, winner set

        Raises:
            AlreadyExists: On any call after the first successful one
        """
        command = _build_command(CalculateWinner, tender_id=tender_id)
        with LogOperation(
            logger, "calculate_winner", caller=caller, tender_id=command.tender_id
        ) as op:
            with self.locks.for_tender(command.tender_id):
                events = self.tender_handlers.handle_calculate_winner(
                    command, generate_id(), caller, self.acl, self.tender_registry
                )
                self._commit(events)
                tender = self._tender_snapshot(command.tender_id)
            op.context["winner"] = tender.winner
            op.context["winning_score"] = events[0].payload["winning_score"]
        winners_selected_total.inc()
        self._refresh_status_metrics()
        return tender

    # Offers

    @track_command_duration("SubmitOffer")
    def submit_offer(
        self, caller: str, tender_id: int, price: int, documentation: str
    ) -> Offer:
        """
        Submit the caller's offer on an OPEN tender

        The offer and the caller's place in the participant list become
        visible together.
        """
        command = _build_command(
            SubmitOffer, tender_id=tender_id, price=price, documentation=documentation
        )
        with LogOperation(
            logger, "submit_offer", caller=caller, tender_id=command.tender_id,
            price=command.price, documentation=command.documentation,
        ):
            with self.locks.for_tender(command.tender_id):
                events = self.tender_handlers.handle_submit_offer(
                    command, generate_id(), caller, self.acl, self.tender_registry
                )
                self._commit(events)
                offer = Offer.model_validate(
                    self.tender_registry.get_offer(command.tender_id, caller)
                )
        offers_submitted_total.inc()
        return offer

    @track_command_duration("EvaluateOffer")
    def evaluate_offer(
        self, caller: str, tender_id: int, provider: str, quality_score: int
    ) -> Offer:
        """Score one offer (evaluator only, tender CLOSED)"""
        command = _build_command(
            EvaluateOffer,
            tender_id=tender_id,
            provider=provider,
            quality_score=quality_score,
        )
        with LogOperation(
            logger, "evaluate_offer", caller=caller, tender_id=command.tender_id,
            provider=command.provider, quality_score=command.quality_score,
        ):
            with self.locks.for_tender(command.tender_id):
                events = self.tender_handlers.handle_evaluate_offer(
                    command, generate_id(), caller, self.acl, self.tender_registry
                )
                self._commit(events)
                offer = Offer.model_validate(
                    self.tender_registry.get_offer(command.tender_id, command.provider)
                )
        offers_evaluated_total.inc()
        return offer

    # Queries

    def _tender_snapshot(self, tender_id: int) -> Tender:
        tender = tender_invariants.require_tender(self.tender_registry, tender_id)
        return Tender.model_validate(tender)

    def get_tender(self, tender_id: int) -> Tender:
        """
        Get tender snapshot

        Raises:
            TenderNotFound: If no tender has this id
        """
        with self.locks.for_tender(tender_id):
            return self._tender_snapshot(tender_id)

    def tender_count(self) -> int:
        """Number of tenders ever created (ids run 1..count)"""
        with self.locks.creation_lock:
            return self.tender_registry.count()

    def list_tenders(self, status: TenderStatus | None = None) -> list[Tender]:
        """List tenders in id order, optionally only those in one state"""
        with self.locks.creation_lock:
            tender_ids = self.tender_registry.tender_ids()
        snapshots = [self.get_tender(tender_id) for tender_id in tender_ids]
        if status is None:
            return snapshots
        return [t for t in snapshots if t.status == status]

    def tender_counts_by_status(self) -> dict[str, int]:
        with self.locks.creation_lock:
            return self.tender_registry.counts_by_status()

    def get_offer(self, tender_id: int, provider: str) -> Offer:
        """
        Raises:
            OfferNotFound: If provider has no offer on the tender
        """
        with self.locks.for_tender(tender_id):
            offer = tender_invariants.require_offer(self.tender_registry, tender_id, provider)
            return Offer.model_validate(offer)

    def get_offers(self, tender_id: int) -> OffersView:
        """
        Offers as parallel sequences in participant order

        total_scores holds the combined score of evaluated offers and 0 for
        the rest.

        Raises:
            TenderNotFound: If no tender has this id
        """
        with self.locks.for_tender(tender_id):
            tender = tender_invariants.require_tender(self.tender_registry, tender_id)
            view = OffersView()
            for offer in self.tender_registry.offers_for(tender_id):
                view.providers.append(offer["provider"])
                view.prices.append(offer["price"])
                view.quality_scores.append(offer["quality_score"])
                if offer["evaluated"]:
                    entry = score_offer(tender, offer, self.policy.score_scale)
                    view.total_scores.append(entry.combined_score)
                else:
                    view.total_scores.append(0)
            return view

    def get_participants(self, tender_id: int) -> list[str]:
        """
        Providers in submission order

        Raises:
            TenderNotFound: If no tender has this id
        """
        with self.locks.for_tender(tender_id):
            tender_invariants.require_tender(self.tender_registry, tender_id)
            return self.tender_registry.participants(tender_id)

    def tender_history(self, tender_id: int) -> list[Event]:
        """
        Audit trail: every event on the tender's stream, oldest first

        Raises:
            TenderNotFound: If no tender has this id
        """
        with self.locks.for_tender(tender_id):
            tender_invariants.require_tender(self.tender_registry, tender_id)
            return self.event_store.load_stream(tender_stream_id(tender_id))
