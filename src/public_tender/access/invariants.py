"""
Access Control Invariants

The one authorization check every mutating entry point calls, plus input
validation for role changes. Pure functions: they read the projection and
raise, they never mutate.
"""

from public_tender.access.models import REQUIRED_ROLES, Operation, Role
from public_tender.access.projections import AccessControlList
from public_tender.kernel.errors import (
    AlreadyExists,
    EvaluatorNotFound,
    InvalidInput,
    Unauthorized,
)


def authorize(acl: AccessControlList, caller: str | None, operation: Operation) -> None:
    """
    Check that caller holds the role required for operation

    Args:
        acl: Current access control projection
        caller: Identity performing the call
        operation: Operation being attempted

    Raises:
        Unauthorized: If caller lacks the required role
    """
    role = REQUIRED_ROLES[operation]
    if role is Role.ANY:
        if not caller:
            raise Unauthorized(caller, operation.value, "a caller identity")
        return
    if role is Role.AUTHORITY and not acl.is_authority(caller):
        raise Unauthorized(caller, operation.value, "the authority role")
    if role is Role.EVALUATOR and not acl.is_evaluator(caller):
        raise Unauthorized(caller, operation.value, "the evaluator role")


def validate_address(address: str | None, field: str = "address") -> str:
    """
    Validate an identity argument is non-empty and stored exactly as given

    Raises:
        InvalidInput: If address is missing, blank or padded with whitespace
    """
    if address is None or not address.strip():
        raise InvalidInput(f"{field} must be a non-empty identity")
    if address != address.strip():
        raise InvalidInput(f"{field} must not have leading or trailing whitespace")
    return address


def validate_evaluator_addable(acl: AccessControlList, address: str) -> None:
    """
    Raises:
        AlreadyExists: If address is already an evaluator
    """
    if acl.is_evaluator(address):
        raise AlreadyExists(f"{address} is already an evaluator")


def validate_evaluator_removable(acl: AccessControlList, address: str) -> None:
    """
    Raises:
        EvaluatorNotFound: If address is not an evaluator
    """
    if not acl.is_evaluator(address):
        raise EvaluatorNotFound(address)
