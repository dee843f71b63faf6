"""
Tender Commands

Intentions to move a tender through its lifecycle. Field types are checked
here; business rules (weights, price ceilings, phases) are checked in
handlers via invariants.
"""

from pydantic import BaseModel, Field


class CreateTender(BaseModel):
    """
    Publish a new tender (authority only)

    The tender opens immediately and accepts offers for deadline_days units.
    """

    description: str = Field(..., description="What is being procured")
    max_price: int = Field(..., description="Highest acceptable offer price")
    deadline_days: int = Field(..., description="Offer period length in days")
    weight_price: int = Field(..., description="Weight of the price score (0-100)")
    weight_quality: int = Field(..., description="Weight of the quality score (0-100)")


class SubmitOffer(BaseModel):
    """Submit the caller's single offer on an open tender"""

    tender_id: int = Field(..., description="Target tender")
    price: int = Field(..., description="Declared price, at most the tender's max_price")
    documentation: str = Field(..., description="Opaque documentation reference")


class CloseOfferPeriod(BaseModel):
    """End the offer period once the deadline has passed (OPEN → CLOSED)"""

    tender_id: int = Field(..., description="Tender to close")


class EvaluateOffer(BaseModel):
    """Record one offer's quality score (evaluator only)"""

    tender_id: int = Field(..., description="Tender under evaluation")
    provider: str = Field(..., description="Provider whose offer is scored")
    quality_score: int = Field(..., description="Quality score (0-100)")


class MarkAsEvaluated(BaseModel):
    """Confirm every offer is scored (CLOSED → EVALUATED)"""

    tender_id: int = Field(..., description="Tender to mark")


class CalculateWinner(BaseModel):
    """Compute and commit the winner (EVALUATED → FINALIZED)"""

    tender_id: int = Field(..., description="Tender to finalize")
