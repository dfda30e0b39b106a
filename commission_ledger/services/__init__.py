"""Business logic services."""

from commission_ledger.services.affiliates import (
    AffiliateSnapshotProvider,
    AffiliateStatsUpdater,
    SqlAffiliateDirectory,
)
from commission_ledger.services.commission import CalculationStage, CommissionCalculator
from commission_ledger.services.engine import CommissionEngine, EngineState
from commission_ledger.services.events import EventBus
from commission_ledger.services.ledger import CommissionLedger, LedgerPage
from commission_ledger.services.rates import RateMode, apply_limits, resolve_rate, resolve_volume_bonus
from commission_ledger.services.stats import StatsAggregator
from commission_ledger.services.tier_registry import TierRegistry

__all__ = [
    "AffiliateSnapshotProvider",
    "AffiliateStatsUpdater",
    "SqlAffiliateDirectory",
    "CalculationStage",
    "CommissionCalculator",
    "CommissionEngine",
    "EngineState",
    "EventBus",
    "CommissionLedger",
    "LedgerPage",
    "RateMode",
    "apply_limits",
    "resolve_rate",
    "resolve_volume_bonus",
    "StatsAggregator",
    "TierRegistry",
]
