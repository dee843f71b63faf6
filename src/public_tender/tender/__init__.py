"""
Tender Module - lifecycle, offers, evaluation and winner selection

A tender moves strictly forward OPEN → CLOSED → EVALUATED → FINALIZED.
Offers arrive while OPEN, evaluators score them while CLOSED, and the winner
is computed once from integer price and quality scores.

Fun fact: "Tender" comes from the Old French 'tendre', to hold out or offer.
Providers hold out their prices; the authority holds out the deadline.
"""

from public_tender.tender.commands import (
    CalculateWinner,
    CloseOfferPeriod,
    CreateTender,
    EvaluateOffer,
    MarkAsEvaluated,
    SubmitOffer,
)
from public_tender.tender.handlers import TenderCommandHandlers
from public_tender.tender.models import (
    Offer,
    OffersView,
    RankingEntry,
    Tender,
    TenderStatus,
)
from public_tender.tender.projections import TenderRegistry
from public_tender.tender.scoring import (
    compute_combined_score,
    compute_price_score,
    select_winner,
)

__all__ = [
    # Models
    "TenderStatus",
    "Tender",
    "Offer",
    "OffersView",
    "RankingEntry",
    # Commands
    "CreateTender",
    "SubmitOffer",
    "CloseOfferPeriod",
    "EvaluateOffer",
    "MarkAsEvaluated",
    "CalculateWinner",
    # Handlers & projections
    "TenderCommandHandlers",
    "TenderRegistry",
    # Scoring
    "compute_price_score",
    "compute_combined_score",
    "select_winner",
]
