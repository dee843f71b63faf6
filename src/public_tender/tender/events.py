"""
Tender Events

Immutable facts on a tender's stream. Offers live on their tender's stream
too, so one stream version orders every change to a tender.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class TenderCreated(BaseModel):
    """Tender published and open for offers"""

    tender_id: int = Field(..., description="Sequential tender number")
    creator: str = Field(..., description="Authority that created the tender")
    description: str = Field(..., description="What is being procured")
    max_price: int = Field(..., description="Highest acceptable price")
    deadline: datetime = Field(..., description="Last instant offers are accepted")
    weight_price: int = Field(..., description="Price weight")
    weight_quality: int = Field(..., description="Quality weight")
    created_at: datetime = Field(..., description="Creation timestamp")


class OfferSubmitted(BaseModel):
    """
    Offer stored and provider appended to the participant list

    One event carries both writes so they become visible together.
    """

    tender_id: int = Field(..., description="Target tender")
    provider: str = Field(..., description="Submitting identity")
    price: int = Field(..., description="Declared price")
    documentation: str = Field(..., description="Documentation reference")
    submitted_at: datetime = Field(..., description="Submission timestamp")


class OfferPeriodClosed(BaseModel):
    """Offer period ended (OPEN → CLOSED)"""

    tender_id: int = Field(..., description="Tender identifier")
    participant_count: int = Field(..., description="Offers received")
    closed_at: datetime = Field(..., description="Close timestamp")
    closed_by: str = Field(..., description="Authority that closed it")


class OfferEvaluated(BaseModel):
    """Quality score recorded against one offer"""

    tender_id: int = Field(..., description="Tender identifier")
    provider: str = Field(..., description="Provider whose offer was scored")
    quality_score: int = Field(..., description="Quality score")
    evaluated_at: datetime = Field(..., description="Scoring timestamp")
    evaluated_by: str = Field(..., description="Evaluator identity")


class TenderEvaluated(BaseModel):
    """Every offer scored (CLOSED → EVALUATED)"""

    tender_id: int = Field(..., description="Tender identifier")
    evaluated_at: datetime = Field(..., description="Timestamp")
    evaluated_by: str = Field(..., description="Authority that confirmed completeness")


class WinnerCalculated(BaseModel):
    """
    Winner committed (EVALUATED → FINALIZED)

    Carries the full ranking so the decision can be audited from the log
    alone.
    """

    tender_id: int = Field(..., description="Tender identifier")
    winner: str = Field(..., description="Winning provider")
    winning_score: int = Field(..., description="Winner's combined score")
    ranking: list[dict[str, Any]] = Field(
        ..., description="Per-participant scores in submission order"
    )
    finalized_at: datetime = Field(..., description="Finalization timestamp")
    finalized_by: str = Field(..., description="Authority that finalized")
