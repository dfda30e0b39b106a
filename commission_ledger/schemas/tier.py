"""
Tier and volume bonus definitions.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TierDefinition(BaseModel):
    """A named rate bracket used when multi-tier mode is enabled."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1)
    rate: Decimal = Field(..., ge=0, le=100, description="Percentage of the sale amount")
    name: str = Field(..., min_length=1, max_length=100)
    bonus: Optional[Decimal] = Field(
        None,
        ge=0,
        description="Flat amount added to every commission in this tier",
    )


class VolumeBonusRule(BaseModel):
    """Extra percentage once cumulative sales reach the threshold."""

    model_config = ConfigDict(frozen=True)

    threshold: Decimal = Field(..., gt=0)
    bonus: Decimal = Field(..., ge=0, le=100)


class TierUpdateResult(BaseModel):
    """Response of an administrative tier replacement."""

    success: bool
    tiers: list[TierDefinition]
