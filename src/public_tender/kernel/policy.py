"""
Tender Policy - configuration parameters of the tender workflow

One object collects the numbers the workflow is built around: the score
scale shared by weights, quality scores and the price-score cap, the length
of one deadline unit, and the identity that becomes authority on a fresh
database.
"""

from datetime import timedelta

from pydantic import BaseModel, Field


class TenderPolicy(BaseModel):
    """
    Configuration for a tender system instance

    Defaults reproduce the classic rules: weights sum to 100, quality is
    scored 0-100, price score is capped at 100, deadlines count in days.
    """

    policy_version: str = Field(
        default="1.0",
        description="Policy version for tracking changes over time",
    )

    score_scale: int = Field(
        default=100,
        ge=1,
        description="Required weight sum, maximum quality score and price-score cap",
    )

    deadline_unit: timedelta = Field(
        default=timedelta(days=1),
        description="Length of one unit of deadline_days",
    )

    default_authority: str = Field(
        default="authority",
        min_length=1,
        description="Authority identity assigned when a new database is initialized",
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "description": "Parameters of the tender lifecycle and scoring"
        },
    }

