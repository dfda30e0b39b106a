"""
Aggregated commission statistics.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from commission_ledger.schemas.tier import TierDefinition


class MonthlyBreakdown(BaseModel):
    commissions: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")
    count: int = 0


class CommissionStats(BaseModel):
    """
    Summary over a slice of the ledger.

    tier_info is the affiliate's *current* tier, resolved at query time
    (multi-tier mode only), not the tier that applied to past records.
    """

    total_commissions: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    average_commission: Decimal = Decimal("0")
    commission_count: int = 0
    monthly_breakdown: dict[str, MonthlyBreakdown] = Field(
        default_factory=dict,
        description="Keyed by YYYY-MM",
    )
    tier_info: Optional[TierDefinition] = None
