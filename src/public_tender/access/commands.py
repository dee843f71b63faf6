"""
Access Control Commands

Intentions to change who holds the authority and evaluator roles.
"""

from pydantic import BaseModel, Field


class AddEvaluator(BaseModel):
    """Grant the evaluator role to an identity"""

    address: str = Field(..., description="Identity to add to the evaluator set")


class RemoveEvaluator(BaseModel):
    """Withdraw the evaluator role from an identity"""

    address: str = Field(..., description="Identity to remove from the evaluator set")


class TransferAuthority(BaseModel):
    """Hand the authority role to another identity"""

    new_authority: str = Field(..., description="Identity that becomes authority")


class RenounceAuthority(BaseModel):
    """
    Give up the authority role without a successor

    Irreversible: afterwards no identity can create tenders or drive
    lifecycle transitions.
    """
