"""
Read-only affiliate projection used to resolve rates and bonuses.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from commission_ledger.models.affiliate import AffiliateStatus


class AffiliateSnapshot(BaseModel):
    """Minimal view of an affiliate. Never mutated by the commission engine."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    tier: Optional[int] = None
    total_sales: Decimal = Decimal("0")
    total_commissions: Decimal = Decimal("0")
    status: AffiliateStatus = AffiliateStatus.ACTIVE

    @classmethod
    def neutral(cls, affiliate_id: str) -> "AffiliateSnapshot":
        """Snapshot used when the affiliate cannot be resolved: no tier, no prior sales."""
        return cls(id=affiliate_id)
