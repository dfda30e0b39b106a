"""
Database models.

    from commission_ledger.models import Affiliate, AffiliateStatus, Base
"""

from commission_ledger.models.affiliate import Affiliate, AffiliateStatus
from commission_ledger.models.base import Base, TimestampMixin

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Affiliate
    "Affiliate",
    "AffiliateStatus",
]
