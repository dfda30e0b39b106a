"""
Commission statistics over a slice of the ledger.
"""

from decimal import Decimal
from typing import Iterable

from commission_ledger.schemas.commission import CommissionRecord
from commission_ledger.schemas.stats import CommissionStats, MonthlyBreakdown
from commission_ledger.utils.dates import month_key


class StatsAggregator:
    """Folds commission records into totals, an average and monthly buckets."""

    def summarize(self, records: Iterable[CommissionRecord]) -> CommissionStats:
        total_commissions = Decimal("0")
        total_amount = Decimal("0")
        count = 0
        months: dict[str, MonthlyBreakdown] = {}

        for record in records:
            total_commissions += record.total_commission
            total_amount += record.amount
            count += 1

            key = month_key(record.timestamp)
            bucket = months.setdefault(key, MonthlyBreakdown())
            bucket.commissions += record.total_commission
            bucket.amount += record.amount
            bucket.count += 1

        average = total_commissions / count if count > 0 else Decimal("0")

        return CommissionStats(
            total_commissions=total_commissions,
            total_amount=total_amount,
            average_commission=average,
            commission_count=count,
            monthly_breakdown={key: months[key] for key in sorted(months)},
        )
