"""
Public Tender - Event-sourced procurement tender workflow

An authority publishes tenders with a maximum price and a deadline, providers
submit one offer each, evaluators score quality, and the winner is computed
deterministically from weighted price and quality scores.

Fun fact: Public procurement accounts for roughly an eighth of world GDP.
Every one of those decisions deserves an audit trail.
"""

__version__ = "0.1.0"

from public_tender.system import TenderSystem  # noqa: E402

__all__ = ["TenderSystem", "__version__"]
