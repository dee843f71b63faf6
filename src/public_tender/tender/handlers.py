"""
Tender Command Handlers

Transform lifecycle commands into events. Handlers validate against the
projections passed in and return the events to append; they never write.
Authorization is always the first check, so an unauthorized caller learns
nothing about the tender's state.
"""

from typing import Any

from public_tender.access.invariants import authorize
from public_tender.access.models import Operation
from public_tender.access.projections import AccessControlList
from public_tender.kernel.errors import InvalidState
from public_tender.kernel.events import Event, create_event
from public_tender.kernel.ids import generate_id, tender_stream_id
from public_tender.kernel.policy import TenderPolicy
from public_tender.kernel.time import TimeProvider, deadline_after
from public_tender.tender import commands, events, invariants
from public_tender.tender.models import TenderStatus
from public_tender.tender.projections import TenderRegistry
from public_tender.tender.scoring import rank_offers, select_winner


class TenderCommandHandlers:
    """Command handlers for the tender lifecycle and offers"""

    def __init__(self, time_provider: TimeProvider, policy: TenderPolicy) -> None:
        self.time_provider = time_provider
        self.policy = policy

    def _emit(
        self,
        tender_id: int,
        version: int,
        event_type: str,
        payload: dict[str, Any],
        command_id: str,
        actor_id: str,
    ) -> list[Event]:
        return [
            create_event(
                event_id=generate_id(),
                event_type=event_type,
                stream_id=tender_stream_id(tender_id),
                stream_type="Tender",
                occurred_at=self.time_provider.now(),
                actor_id=actor_id,
                command_id=command_id,
                payload=payload,
                version=version + 1,
            )
        ]

    def handle_create_tender(
        self,
        command: commands.CreateTender,
        command_id: str,
        caller: str,
        acl: AccessControlList,
        registry: TenderRegistry,
    ) -> list[Event]:
        """
        Publish a tender under the next sequential id

        Returns:
            A single TenderCreated event, opening the tender's stream
        """
        authorize(acl, caller, Operation.CREATE_TENDER)
        invariants.validate_tender_terms(
            command.description, command.max_price, command.deadline_days
        )
        invariants.validate_weights(
            command.weight_price, command.weight_quality, self.policy.score_scale
        )

        now = self.time_provider.now()
        tender_id = registry.next_id()
        payload = events.TenderCreated(
            tender_id=tender_id,
            creator=caller,
            description=command.description,
            max_price=command.max_price,
            deadline=deadline_after(now, command.deadline_days, self.policy.deadline_unit),
            weight_price=command.weight_price,
            weight_quality=command.weight_quality,
            created_at=now,
        ).model_dump(mode="json")
        return self._emit(tender_id, 0, "TenderCreated", payload, command_id, caller)

    def handle_submit_offer(
        self,
        command: commands.SubmitOffer,
        command_id: str,
        caller: str,
        acl: AccessControlList,
        registry: TenderRegistry,
    ) -> list[Event]:
        authorize(acl, caller, Operation.SUBMIT_OFFER)
        tender = invariants.require_tender(registry, command.tender_id)
        invariants.require_status(tender, TenderStatus.OPEN, "accept offers")
        now = self.time_provider.now()
        invariants.validate_before_deadline(tender, now)
        invariants.validate_offer_terms(tender, command.price, command.documentation)
        invariants.validate_no_prior_offer(registry, command.tender_id, caller)

        payload = events.OfferSubmitted(
            tender_id=command.tender_id,
            provider=caller,
            price=command.price,
            documentation=command.documentation,
            submitted_at=now,
        ).model_dump(mode="json")
        return self._emit(
            command.tender_id, tender["version"], "OfferSubmitted", payload, command_id, caller
        )

    def handle_close_offer_period(
        self,
        command: commands.CloseOfferPeriod,
        command_id: str,
        caller: str,
        acl: AccessControlList,
        registry: TenderRegistry,
    ) -> list[Event]:
        authorize(acl, caller, Operation.CLOSE_OFFER_PERIOD)
        tender = invariants.require_tender(registry, command.tender_id)
        invariants.require_status(tender, TenderStatus.OPEN, "close the offer period")
        now = self.time_provider.now()
        invariants.validate_deadline_passed(tender, now)
        participants = invariants.require_participants(registry, command.tender_id)

        payload = events.OfferPeriodClosed(
            tender_id=command.tender_id,
            participant_count=len(participants),
            closed_at=now,
            closed_by=caller,
        ).model_dump(mode="json")
        return self._emit(
            command.tender_id, tender["version"], "OfferPeriodClosed", payload, command_id, caller
        )

    def handle_evaluate_offer(
        self,
        command: commands.EvaluateOffer,
        command_id: str,
        caller: str,
        acl: AccessControlList,
        registry: TenderRegistry,
    ) -> list[Event]:
        """Record a quality score; each call scores exactly one offer"""
        authorize(acl, caller, Operation.EVALUATE_OFFER)
        tender = invariants.require_tender(registry, command.tender_id)
        invariants.require_status(tender, TenderStatus.CLOSED, "evaluate offers")
        invariants.validate_quality_score(command.quality_score, self.policy.score_scale)
        offer = invariants.require_offer(registry, command.tender_id, command.provider)
        invariants.validate_not_evaluated(offer)

        payload = events.OfferEvaluated(
            tender_id=command.tender_id,
            provider=command.provider,
            quality_score=command.quality_score,
            evaluated_at=self.time_provider.now(),
            evaluated_by=caller,
        ).model_dump(mode="json")
        return self._emit(
            command.tender_id, tender["version"], "OfferEvaluated", payload, command_id, caller
        )

    def handle_mark_as_evaluated(
        self,
        command: commands.MarkAsEvaluated,
        command_id: str,
        caller: str,
        acl: AccessControlList,
        registry: TenderRegistry,
    ) -> list[Event]:
        authorize(acl, caller, Operation.MARK_AS_EVALUATED)
        tender = invariants.require_tender(registry, command.tender_id)
        invariants.require_status(tender, TenderStatus.CLOSED, "be marked as evaluated")
        participants = invariants.require_participants(registry, command.tender_id)
        invariants.validate_all_evaluated(registry, command.tender_id, participants)

        payload = events.TenderEvaluated(
            tender_id=command.tender_id,
            evaluated_at=self.time_provider.now(),
            evaluated_by=caller,
        ).model_dump(mode="json")
        return self._emit(
            command.tender_id, tender["version"], "TenderEvaluated", payload, command_id, caller
        )

    def handle_calculate_winner(
        self,
        command: commands.CalculateWinner,
        command_id: str,
        caller: str,
        acl: AccessControlList,
        registry: TenderRegistry,
    ) -> list[Event]:
        """
        Score every participant in submission order and commit the leader

        The only irreversible write of the lifecycle: a second call fails
        with AlreadyExists rather than recomputing.

        Raises:
            AlreadyExists: If the winner is already set
            InvalidState: If not EVALUATED, or no leader emerged
        """
        authorize(acl, caller, Operation.CALCULATE_WINNER)
        tender = invariants.require_tender(registry, command.tender_id)
        invariants.validate_winner_not_set(tender)
        invariants.require_status(tender, TenderStatus.EVALUATED, "calculate the winner")

        ranking = rank_offers(
            tender, registry.offers_for(command.tender_id), self.policy.score_scale
        )
        leader = select_winner(ranking)
        if leader is None:
            raise InvalidState(f"Tender {command.tender_id} has no valid winner")

        payload = events.WinnerCalculated(
            tender_id=command.tender_id,
            winner=leader.provider,
            winning_score=leader.combined_score,
            ranking=[entry.model_dump() for entry in ranking],
            finalized_at=self.time_provider.now(),
            finalized_by=caller,
        ).model_dump(mode="json")
        return self._emit(
            command.tender_id, tender["version"], "WinnerCalculated", payload, command_id, caller
        )
