"""Pydantic schemas for engine inputs and outputs."""

from commission_ledger.schemas.affiliate import AffiliateSnapshot
from commission_ledger.schemas.commission import (
    CommissionHistory,
    CommissionRecord,
    CommissionRequest,
    HistoryQuery,
    HistoryRequest,
    Pagination,
    TrackCommissionRequest,
    TransactionData,
)
from commission_ledger.schemas.stats import CommissionStats, MonthlyBreakdown
from commission_ledger.schemas.tier import TierDefinition, TierUpdateResult, VolumeBonusRule

__all__ = [
    # Affiliate
    "AffiliateSnapshot",
    # Commission
    "CommissionRequest",
    "TransactionData",
    "TrackCommissionRequest",
    "HistoryQuery",
    "HistoryRequest",
    "CommissionRecord",
    "CommissionHistory",
    "Pagination",
    # Stats
    "CommissionStats",
    "MonthlyBreakdown",
    # Tiers
    "TierDefinition",
    "TierUpdateResult",
    "VolumeBonusRule",
]
