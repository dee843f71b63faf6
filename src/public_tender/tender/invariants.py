"""
Tender Invariants

Pure validation functions for the tender lifecycle. Each raises the error
kind callers are promised and never mutates anything.

Fun fact: The term 'invariant' comes from mathematical logic - properties that
must hold throughout a computation. Here: weights sum to 100, forever.
"""

from datetime import datetime
from typing import Any

from public_tender.kernel.errors import (
    AlreadyExists,
    DeadlineViolation,
    InvalidInput,
    InvalidState,
    OfferNotFound,
    TenderNotFound,
)
from public_tender.kernel.time import offer_period_open
from public_tender.tender.models import TenderStatus


# ============================================================================
# Creation
# ============================================================================


def validate_weights(weight_price: int, weight_quality: int, scale: int = 100) -> None:
    """
    Each weight within 0..scale and together exactly scale

    Raises:
        InvalidInput: If weights are out of range or don't sum to scale
    """
    for name, weight in (("weight_price", weight_price), ("weight_quality", weight_quality)):
        if weight < 0 or weight > scale:
            raise InvalidInput(f"{name} must be between 0 and {scale} (got {weight})")
    if weight_price + weight_quality != scale:
        raise InvalidInput(
            f"weights must sum to {scale} (got {weight_price} + {weight_quality})"
        )


def validate_tender_terms(description: str, max_price: int, deadline_days: int) -> None:
    """
    Raises:
        InvalidInput: If description empty, max_price <= 0 or deadline_days <= 0
    """
    if not description or not description.strip():
        raise InvalidInput("description must not be empty")
    if max_price <= 0:
        raise InvalidInput(f"max_price must be positive (got {max_price})")
    if deadline_days <= 0:
        raise InvalidInput(f"deadline_days must be positive (got {deadline_days})")


# ============================================================================
# Lookup & lifecycle
# ============================================================================


def require_tender(tender_registry: Any, tender_id: int) -> dict[str, Any]:
    """
    Raises:
        TenderNotFound: If no tender has this id
    """
    tender = tender_registry.get(tender_id)
    if tender is None:
        raise TenderNotFound(tender_id)
    return tender


def require_status(tender: dict[str, Any], expected: TenderStatus, action: str) -> None:
    """
    Raises:
        InvalidState: If the tender is not in the expected phase
    """
    if tender["status"] != expected:
        raise InvalidState(
            f"Tender {tender['tender_id']} must be {expected.value} to {action} "
            f"(current: {tender['status'].value})"
        )


def require_participants(tender_registry: Any, tender_id: int) -> list[str]:
    """
    Raises:
        InvalidInput: If the tender has received no offers
    """
    participants = tender_registry.participants(tender_id)
    if not participants:
        raise InvalidInput(f"Tender {tender_id} has no offers")
    return participants


def validate_before_deadline(tender: dict[str, Any], now: datetime) -> None:
    """
    Offers are accepted up to and including the deadline instant

    Raises:
        DeadlineViolation: If now is after the deadline
    """
    if not offer_period_open(tender["deadline"], now):
        raise DeadlineViolation(
            f"Tender {tender['tender_id']} stopped accepting offers at "
            f"{tender['deadline'].isoformat()}"
        )


def validate_deadline_passed(tender: dict[str, Any], now: datetime) -> None:
    """
    The offer period may only close strictly after the deadline

    Raises:
        DeadlineViolation: If now is at or before the deadline
    """
    if offer_period_open(tender["deadline"], now):
        raise DeadlineViolation(
            f"Tender {tender['tender_id']} accepts offers until "
            f"{tender['deadline'].isoformat()}"
        )


# ============================================================================
# Offers
# ============================================================================


def validate_offer_terms(tender: dict[str, Any], price: int, documentation: str) -> None:
    """
    Raises:
        InvalidInput: If price is not in 1..max_price or documentation is empty
    """
    if price <= 0:
        raise InvalidInput(f"price must be positive (got {price})")
    if price > tender["max_price"]:
        raise InvalidInput(
            f"price {price} exceeds tender maximum {tender['max_price']}"
        )
    if not documentation or not documentation.strip():
        raise InvalidInput("documentation reference must not be empty")


def validate_no_prior_offer(tender_registry: Any, tender_id: int, provider: str) -> None:
    """
    Existence is checked on the stored flag, never inferred from a score

    Raises:
        AlreadyExists: If provider already submitted an offer
    """
    if tender_registry.get_offer(tender_id, provider) is not None:
        raise AlreadyExists(f"{provider} already submitted an offer on tender {tender_id}")


def require_offer(tender_registry: Any, tender_id: int, provider: str) -> dict[str, Any]:
    """
    Raises:
        OfferNotFound: If provider has no offer on the tender
    """
    offer = tender_registry.get_offer(tender_id, provider)
    if offer is None or not offer["exist"]:
        raise OfferNotFound(tender_id, provider)
    return offer


def validate_quality_score(quality_score: int, scale: int = 100) -> None:
    """
    Raises:
        InvalidInput: If score is outside 0..scale
    """
    if quality_score < 0 or quality_score > scale:
        raise InvalidInput(f"quality score must be between 0 and {scale} (got {quality_score})")


def validate_not_evaluated(offer: dict[str, Any]) -> None:
    """
    Raises:
        AlreadyExists: If the offer already has a score
    """
    if offer["evaluated"]:
        raise AlreadyExists(
            f"Offer from {offer['provider']} on tender {offer['tender_id']} already evaluated"
        )


def validate_all_evaluated(tender_registry: Any, tender_id: int, participants: list[str]) -> None:
    """
    Walk the whole participant list, rejecting at the first unscored offer

    Raises:
        InvalidInput: If any participant's offer is not evaluated
    """
    for provider in participants:
        offer = tender_registry.get_offer(tender_id, provider)
        if offer is None or not offer["evaluated"]:
            raise InvalidInput(
                f"Not all offers are evaluated: {provider} on tender {tender_id} is pending"
            )


def validate_winner_not_set(tender: dict[str, Any]) -> None:
    """
    Raises:
        AlreadyExists: If the tender is finalized or already has a winner
    """
    if tender["winner"] is not None or tender["status"] == TenderStatus.FINALIZED:
        raise AlreadyExists(f"Winner already calculated for tender {tender['tender_id']}")
