"""
Affiliate collaborators of the commission engine.

The engine reads a snapshot (tier, cumulative sales) before computing a
commission and signals the new totals after tracking one. Both sides are
protocols so any affiliate store can plug in; SqlAffiliateDirectory is the
SQLAlchemy implementation over the affiliates table.
"""

import logging
from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commission_ledger.db.session import session_scope
from commission_ledger.errors import NotFoundError
from commission_ledger.models.affiliate import Affiliate
from commission_ledger.schemas.affiliate import AffiliateSnapshot

logger = logging.getLogger(__name__)


@runtime_checkable
class AffiliateSnapshotProvider(Protocol):
    """Resolves an affiliate snapshot, None when unknown."""

    async def get(self, affiliate_id: str) -> Optional[AffiliateSnapshot]:
        ...


@runtime_checkable
class AffiliateStatsUpdater(Protocol):
    """Receives sales/commission deltas after a tracked commission."""

    async def notify(
        self,
        affiliate_id: str,
        amount_delta: Decimal,
        commission_delta: Decimal,
    ) -> None:
        ...


class SqlAffiliateDirectory:
    """Affiliate snapshot provider and stats updater backed by the affiliates table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, affiliate_id: str) -> Optional[AffiliateSnapshot]:
        async with self._session_factory() as session:
            affiliate = await session.get(Affiliate, affiliate_id)
            if affiliate is None:
                return None
            return AffiliateSnapshot.model_validate(affiliate)

    async def notify(
        self,
        affiliate_id: str,
        amount_delta: Decimal,
        commission_delta: Decimal,
    ) -> None:
        """
        Add deltas to the affiliate's cumulative totals.

        The increment is a single UPDATE, so concurrent notifications for the
        same affiliate never overwrite each other.

        Raises:
            NotFoundError: affiliate does not exist
        """
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                update(Affiliate)
                .where(Affiliate.id == affiliate_id)
                .values(
                    total_sales=Affiliate.total_sales + amount_delta,
                    total_commissions=Affiliate.total_commissions + commission_delta,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"Affiliate {affiliate_id} not found")

        logger.info(
            f"Updated stats for affiliate {affiliate_id}: "
            f"+{amount_delta} sales, +{commission_delta} commission"
        )
