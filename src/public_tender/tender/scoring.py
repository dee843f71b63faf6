"""
Weighted Winner Selection

Deterministic, integer-only scoring: the same offers and scores always give
the same ranking and the same winner. Ties go to the earliest submission.

    price_score    = min(scale, max_price * scale // price)
    combined_score = (price_score * weight_price + quality * weight_quality) // scale

Because every accepted price is at most max_price, price_score is always at
its cap; the quality weight decides between offers and the price weight sets
the floor.
"""

from typing import Any

from public_tender.tender.models import RankingEntry


def compute_price_score(max_price: int, price: int, scale: int = 100) -> int:
    """
    Normalized price competitiveness, capped at scale

    Args:
        max_price: Tender's maximum price
        price: Offer price (always > 0, enforced at submission)
        scale: Score scale (100)

    Example:
        >>> compute_price_score(1000, 500)
        100
    """
    return min(scale, max_price * scale // price)


def compute_combined_score(
    price_score: int,
    quality_score: int,
    weight_price: int,
    weight_quality: int,
    scale: int = 100,
) -> int:
    """
    Weighted blend of price and quality scores (floor division)

    Example:
        >>> compute_combined_score(100, 90, 60, 40)
        96
    """
    return (price_score * weight_price + quality_score * weight_quality) // scale


def score_offer(tender: dict[str, Any], offer: dict[str, Any], scale: int = 100) -> RankingEntry:
    """Compute one offer's price and combined scores under its tender's weights"""
    price_score = compute_price_score(tender["max_price"], offer["price"], scale)
    combined = compute_combined_score(
        price_score,
        offer["quality_score"],
        tender["weight_price"],
        tender["weight_quality"],
        scale,
    )
    return RankingEntry(
        provider=offer["provider"],
        price=offer["price"],
        price_score=price_score,
        quality_score=offer["quality_score"],
        combined_score=combined,
    )


def rank_offers(
    tender: dict[str, Any],
    offers: list[dict[str, Any]],
    scale: int = 100,
) -> list[RankingEntry]:
    """
    Score every offer, keeping the order given (submission order)

    Args:
        tender: Tender projection entry
        offers: Offer projection entries in participant order
        scale: Score scale
    """
    return [score_offer(tender, offer, scale) for offer in offers]


def select_winner(ranking: list[RankingEntry]) -> RankingEntry | None:
    """
    Pick the highest combined score in a single pass

    A participant takes the lead only with a strictly greater score, so
    ties keep the earliest-submitted leader.

    Returns:
        The winning entry, or None if ranking is empty
    """
    leader: RankingEntry | None = None
    for entry in ranking:
        if leader is None or entry.combined_score > leader.combined_score:
            leader = entry
    return leader
