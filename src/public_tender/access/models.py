"""
Access Control Models

One authority drives the tender lifecycle, a set of evaluators scores offers,
and anyone may submit an offer. Each operation names the role it needs.
"""

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Role an identity must hold to perform an operation"""

    AUTHORITY = "authority"
    EVALUATOR = "evaluator"
    ANY = "any"


class Operation(str, Enum):
    """Every mutating operation of the system, keyed for authorization"""

    ADD_EVALUATOR = "add_evaluator"
    REMOVE_EVALUATOR = "remove_evaluator"
    TRANSFER_AUTHORITY = "transfer_authority"
    RENOUNCE_AUTHORITY = "renounce_authority"
    CREATE_TENDER = "create_tender"
    SUBMIT_OFFER = "submit_offer"
    CLOSE_OFFER_PERIOD = "close_offer_period"
    EVALUATE_OFFER = "evaluate_offer"
    MARK_AS_EVALUATED = "mark_as_evaluated"
    CALCULATE_WINNER = "calculate_winner"


REQUIRED_ROLES: dict[Operation, Role] = {
    Operation.ADD_EVALUATOR: Role.AUTHORITY,
    Operation.REMOVE_EVALUATOR: Role.AUTHORITY,
    Operation.TRANSFER_AUTHORITY: Role.AUTHORITY,
    Operation.RENOUNCE_AUTHORITY: Role.AUTHORITY,
    Operation.CREATE_TENDER: Role.AUTHORITY,
    Operation.SUBMIT_OFFER: Role.ANY,
    Operation.CLOSE_OFFER_PERIOD: Role.AUTHORITY,
    Operation.EVALUATE_OFFER: Role.EVALUATOR,
    Operation.MARK_AS_EVALUATED: Role.AUTHORITY,
    Operation.CALCULATE_WINNER: Role.AUTHORITY,
}


class AccessSnapshot(BaseModel):
    """Read-only view of who holds which role"""

    authority: str | None = Field(
        default=None, description="Current authority (None once renounced)"
    )
    evaluators: list[str] = Field(
        default_factory=list, description="Evaluators in the order they were added"
    )
