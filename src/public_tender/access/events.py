"""
Access Control Events

Role changes are events on the single 'access-control' stream, so the full
history of who could do what is part of the audit log.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AuthorityAssigned(BaseModel):
    """Initial authority recorded when a database is first opened"""

    authority: str = Field(..., description="Initial authority identity")
    assigned_at: datetime = Field(..., description="Assignment timestamp")


class AuthorityTransferred(BaseModel):
    """Authority role moved to a new identity"""

    previous_authority: str = Field(..., description="Authority before the transfer")
    new_authority: str = Field(..., description="Authority after the transfer")
    transferred_at: datetime = Field(..., description="Transfer timestamp")


class AuthorityRenounced(BaseModel):
    """Authority role given up with no successor"""

    previous_authority: str = Field(..., description="Authority that renounced")
    renounced_at: datetime = Field(..., description="Renunciation timestamp")


class EvaluatorAdded(BaseModel):
    """Identity granted the evaluator role"""

    address: str = Field(..., description="New evaluator")
    added_at: datetime = Field(..., description="When the role was granted")
    added_by: str = Field(..., description="Authority that granted it")


class EvaluatorRemoved(BaseModel):
    """Identity lost the evaluator role"""

    address: str = Field(..., description="Former evaluator")
    removed_at: datetime = Field(..., description="When the role was withdrawn")
    removed_by: str = Field(..., description="Authority that withdrew it")
