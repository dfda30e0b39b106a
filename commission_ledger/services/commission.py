"""
Commission calculation.

commission = amount * rate / 100          (rate: tier rate or flat rate)
           + amount * volume_bonus / 100  (bonus applies to this sale only)
           + tier flat bonus              (multi-tier only)
then clamped to [minimum, maximum].

The calculator is pure: it builds a CommissionRecord and never writes it.
Recording is the engine's job.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from commission_ledger.config import CommissionSettings
from commission_ledger.errors import InvalidInputError
from commission_ledger.schemas.affiliate import AffiliateSnapshot
from commission_ledger.schemas.commission import CommissionRecord
from commission_ledger.services.rates import (
    ZERO,
    RateMode,
    apply_limits,
    percent_of,
    resolve_rate,
    resolve_volume_bonus,
)
from commission_ledger.services.tier_registry import TierRegistry
from commission_ledger.utils.dates import ensure_utc, utcnow

logger = logging.getLogger(__name__)


class CalculationStage(str, Enum):
    """Stages of a single commission computation."""
    VALIDATING = "validating"
    RATE_RESOLVED = "rate_resolved"
    BASE_COMPUTED = "base_computed"
    BONUSES_APPLIED = "bonuses_applied"
    CLAMPED = "clamped"
    RECORDED = "recorded"


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class CommissionCalculator:
    """Turns (affiliate, amount) into a CommissionRecord under the current settings."""

    def __init__(self, settings: CommissionSettings, tiers: TierRegistry):
        self.settings = settings
        self.tiers = tiers

    @property
    def mode(self) -> RateMode:
        return RateMode.MULTI_TIER if self.settings.multi_tier else RateMode.FLAT

    def compute(
        self,
        affiliate_id: str,
        amount: Any,
        affiliate: AffiliateSnapshot,
        options: Optional[dict[str, Any]] = None,
        *,
        timestamp: Optional[datetime] = None,
    ) -> CommissionRecord:
        """
        Compute a commission for one sale.

        Args:
            affiliate_id: Affiliate earning the commission
            amount: Sale amount, must be positive
            affiliate: Snapshot providing tier and prior cumulative sales
            options: Opaque metadata stored on the record
            timestamp: Record time, defaults to now (UTC)

        Returns:
            A new, unrecorded CommissionRecord

        Raises:
            InvalidInputError: empty affiliate_id or non-positive amount
        """
        stage = CalculationStage.VALIDATING
        if not affiliate_id:
            raise InvalidInputError("Invalid input: affiliate_id is required", stage=stage)
        try:
            amount = _to_decimal(amount)
        except ArithmeticError:
            raise InvalidInputError(f"Invalid input: amount {amount!r} is not a number", stage=stage)
        if not amount.is_finite() or amount <= 0:
            raise InvalidInputError("Invalid input: amount must be positive", stage=stage)

        rate = resolve_rate(self.mode, affiliate.tier, self.settings.rate, self.tiers)
        stage = CalculationStage.RATE_RESOLVED

        base_commission = percent_of(amount, rate)
        stage = CalculationStage.BASE_COMPUTED

        bonus_rate = resolve_volume_bonus(
            self.settings.volume_bonuses, affiliate.total_sales, amount
        )
        volume_bonus = percent_of(amount, bonus_rate)
        tier_bonus = self._tier_bonus(affiliate)
        stage = CalculationStage.BONUSES_APPLIED

        raw = base_commission + volume_bonus + tier_bonus
        total = apply_limits(raw, self.settings.minimum, self.settings.maximum)
        stage = CalculationStage.CLAMPED

        logger.debug(
            f"Commission for {affiliate_id} reached {stage.value}: "
            f"amount={amount} rate={rate} base={base_commission} "
            f"volume_bonus={volume_bonus} tier_bonus={tier_bonus} raw={raw} total={total}"
        )

        return CommissionRecord(
            id=str(uuid.uuid4()),
            affiliate_id=affiliate_id,
            amount=amount,
            commission_rate=rate,
            base_commission=base_commission,
            volume_bonus=volume_bonus,
            tier_bonus=tier_bonus,
            total_commission=total,
            timestamp=ensure_utc(timestamp) if timestamp else utcnow(),
            options=dict(options or {}),
        )

    def _tier_bonus(self, affiliate: AffiliateSnapshot) -> Decimal:
        if self.mode != RateMode.MULTI_TIER:
            return ZERO
        tier = self.tiers.get_tier(affiliate.tier)
        if not tier or not tier.bonus:
            return ZERO
        return tier.bonus
