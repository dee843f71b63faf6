"""
Tender Domain Models

Read-side snapshots of tenders and offers. Projections hold plain dicts;
these models are what callers get back, detached from projection state.

Fun fact: The first recorded competitive tender was in 1782 when the British
Navy sought bids for biscuits. Their scoring sheet had no weights column.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TenderStatus(str, Enum):
    """
    Tender lifecycle states

    Finite state machine, strictly forward:
    OPEN → CLOSED → EVALUATED → FINALIZED

    A tender whose deadline passes without any offer stays OPEN: closing
    needs at least one participant and there is no expired state.
    """

    OPEN = "OPEN"  # Accepting offers until the deadline
    CLOSED = "CLOSED"  # Offer period over, evaluators scoring
    EVALUATED = "EVALUATED"  # Every offer scored
    FINALIZED = "FINALIZED"  # Winner committed, terminal


class Tender(BaseModel):
    """Published procurement request with price/quality weighting"""

    tender_id: int = Field(..., ge=1, description="Sequential tender number")
    creator: str = Field(..., description="Authority that created the tender")
    description: str = Field(..., description="What is being procured")
    max_price: int = Field(..., gt=0, description="Highest acceptable offer price")
    deadline: datetime = Field(..., description="Last instant offers are accepted")
    weight_price: int = Field(..., ge=0, description="Weight of the price score")
    weight_quality: int = Field(..., ge=0, description="Weight of the quality score")
    status: TenderStatus = Field(..., description="Current lifecycle state")
    winner: str | None = Field(default=None, description="Set once, on finalization")
    participant_count: int = Field(default=0, ge=0, description="Offers received")
    created_at: datetime = Field(..., description="Creation timestamp")
    closed_at: datetime | None = Field(default=None)
    evaluated_at: datetime | None = Field(default=None)
    finalized_at: datetime | None = Field(default=None)


class Offer(BaseModel):
    """
    A provider's bid on a tender

    ``exist`` is always True on a returned offer; it mirrors the stored flag
    that separates "no offer" from "offer scored 0".
    """

    tender_id: int = Field(..., description="Tender the offer belongs to")
    provider: str = Field(..., description="Submitting identity")
    price: int = Field(..., gt=0, description="Declared price")
    documentation: str = Field(..., description="Opaque documentation reference")
    quality_score: int = Field(default=0, ge=0, description="Meaningful once evaluated")
    evaluated: bool = Field(default=False, description="Score recorded")
    exist: bool = Field(default=True, description="Offer has been submitted")
    submitted_at: datetime = Field(..., description="Submission timestamp")
    evaluated_by: str | None = Field(default=None, description="Evaluator who scored it")


class OffersView(BaseModel):
    """
    Parallel sequences over a tender's offers, in submission order

    total_scores holds the combined score of evaluated offers and 0 for
    offers not yet evaluated.
    """

    providers: list[str] = Field(default_factory=list)
    prices: list[int] = Field(default_factory=list)
    quality_scores: list[int] = Field(default_factory=list)
    total_scores: list[int] = Field(default_factory=list)


class RankingEntry(BaseModel):
    """One participant's scores as computed during winner selection"""

    provider: str
    price: int
    price_score: int
    quality_score: int
    combined_score: int
