"""
Access Control Module

Single authority plus a settable evaluator set, with one explicit
authorization check consulted by every mutating operation.
"""

from public_tender.access.commands import (
    AddEvaluator,
    RemoveEvaluator,
    RenounceAuthority,
    TransferAuthority,
)
from public_tender.access.handlers import AccessControlHandlers
from public_tender.access.invariants import authorize
from public_tender.access.models import AccessSnapshot, Operation, Role
from public_tender.access.projections import AccessControlList

__all__ = [
    # Models
    "Role",
    "Operation",
    "AccessSnapshot",
    # Commands
    "AddEvaluator",
    "RemoveEvaluator",
    "TransferAuthority",
    "RenounceAuthority",
    # Handlers & projections
    "AccessControlHandlers",
    "AccessControlList",
    "authorize",
]
