"""
Rate and bonus resolution.

Rules:
- Flat mode: the configured rate applies to everybody
- Multi-tier mode: the affiliate's tier rate, flat rate if the tier is unknown
- Volume bonus: highest bonus whose threshold is met by prior sales + this sale
  (bonuses do not stack)
"""

from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from commission_ledger.schemas.tier import VolumeBonusRule
from commission_ledger.services.tier_registry import TierRegistry

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class RateMode(str, Enum):
    """How the commission rate is chosen."""
    FLAT = "flat"
    MULTI_TIER = "multi_tier"


def resolve_rate(
    mode: RateMode,
    affiliate_tier: Optional[int],
    flat_rate: Decimal,
    tiers: TierRegistry,
) -> Decimal:
    """Return the percentage rate for an affiliate. Never fails."""
    if mode == RateMode.MULTI_TIER:
        tier = tiers.get_tier(affiliate_tier)
        return tier.rate if tier else flat_rate
    return flat_rate


def resolve_volume_bonus(
    rules: Iterable[VolumeBonusRule],
    cumulative_sales: Decimal,
    sale_amount: Decimal,
) -> Decimal:
    """
    Return the bonus percentage earned by this sale.

    Args:
        rules: Volume bonus rules, in any order
        cumulative_sales: Affiliate's sales before this sale
        sale_amount: Amount of this sale

    Returns:
        Highest bonus among rules whose threshold is met, 0 if none
    """
    total = cumulative_sales + sale_amount
    bonus = ZERO
    for rule in rules:
        if total >= rule.threshold:
            bonus = max(bonus, rule.bonus)
    return bonus


def apply_limits(commission: Decimal, minimum: Decimal, maximum: Decimal) -> Decimal:
    """
    Clamp a commission. Bounds <= 0 are disabled.

    The minimum is applied before the maximum, so a minimum above the
    maximum yields the maximum.
    """
    result = commission
    if minimum > 0:
        result = max(result, minimum)
    if maximum > 0:
        result = min(result, maximum)
    return result


def percent_of(amount: Decimal, rate: Decimal) -> Decimal:
    return amount * rate / HUNDRED
