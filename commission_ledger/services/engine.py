"""
Commission engine: the public face of the commission ledger.

calculate_commission: validate -> resolve affiliate -> compute -> append -> notify
track_commission:     calculate_commission -> update affiliate totals (best effort) -> notify
get_commission_history / get_commission_stats: read-only views of the ledger
update_tier_structure: administrative tier replacement

All mutations (ledger append, tier replacement, shutdown) go through one
asyncio.Lock. Ledger reads have no suspension point, so they always observe
a fully indexed ledger.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from commission_ledger.config import CommissionSettings, get_settings
from commission_ledger.errors import CommissionError, NotFoundError
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
from commission_ledger.schemas.stats import CommissionStats
from commission_ledger.schemas.tier import TierDefinition, TierUpdateResult
from commission_ledger.services.affiliates import AffiliateSnapshotProvider, AffiliateStatsUpdater
from commission_ledger.services.commission import CalculationStage, CommissionCalculator
from commission_ledger.services.events import (
    AffiliateStatsUpdateFailed,
    CommissionCalculated,
    CommissionTracked,
    EngineInitialized,
    EngineShutdown,
    EventBus,
    TierStructureUpdated,
)
from commission_ledger.services.ledger import MAX_LIMIT, CommissionLedger
from commission_ledger.services.stats import StatsAggregator
from commission_ledger.services.tier_registry import TierRegistry
from commission_ledger.utils.dates import utcnow
from commission_ledger.utils.validation import validate_input

logger = logging.getLogger(__name__)


@dataclass
class EngineState:
    """Mutable state owned by one engine instance."""
    tiers: TierRegistry = field(default_factory=TierRegistry)
    ledger: CommissionLedger = field(default_factory=CommissionLedger)


class CommissionEngine:
    """
    Computes, records and reports affiliate commissions.

    Usage:
        engine = CommissionEngine(CommissionSettings(multi_tier=True), affiliates=directory)
        await engine.initialize()
        record = await engine.calculate_commission("aff-1", 1000)
    """

    def __init__(
        self,
        settings: Optional[CommissionSettings] = None,
        *,
        state: Optional[EngineState] = None,
        affiliates: Optional[AffiliateSnapshotProvider] = None,
        stats_updater: Optional[AffiliateStatsUpdater] = None,
        events: Optional[EventBus] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.settings = settings or get_settings()
        self.state = state or EngineState()
        self.events = events or EventBus()
        self._affiliates = affiliates
        self._stats_updater = stats_updater
        self._clock = clock
        self._lock = asyncio.Lock()
        self.is_initialized = False

        if len(self.state.tiers) == 0:
            self.state.tiers.set_tiers(self.settings.tiers)
        # Last applied structure, restored by initialize() after a shutdown
        self._configured_tiers = self.state.tiers.list_tiers()

        self.calculator = CommissionCalculator(self.settings, self.state.tiers)
        self.aggregator = StatsAggregator()

    async def initialize(self) -> None:
        """Mark the engine ready, reloading the last tier structure if it was cleared."""
        logger.info("Initializing Commission Engine")
        async with self._lock:
            if len(self.state.tiers) == 0 and self._configured_tiers:
                self.state.tiers.set_tiers(self._configured_tiers)
                logger.info(f"Reloaded {len(self._configured_tiers)} tiers")
            self.is_initialized = True
        await self.events.publish(EngineInitialized(timestamp=self._clock()))

    # ── Commissions ───────────────────────────────────────

    async def calculate_commission(
        self,
        affiliate_id: str,
        amount: Any,
        options: Optional[dict[str, Any]] = None,
    ) -> CommissionRecord:
        """
        Compute and record a commission.

        Args:
            affiliate_id: Affiliate earning the commission
            amount: Positive sale amount
            options: Free-form metadata stored on the record

        Returns:
            The recorded CommissionRecord

        Raises:
            ValidationError: bad input, nothing recorded
            NotFoundError: unknown affiliate with require_known_affiliate enabled
            InvariantViolation: ledger rejected the record
        """
        try:
            request = validate_input(
                CommissionRequest,
                affiliate_id=affiliate_id,
                amount=amount,
                options={} if options is None else options,
            )

            affiliate = await self._get_affiliate(request.affiliate_id)
            record = self.calculator.compute(
                request.affiliate_id,
                request.amount,
                affiliate,
                request.options,
                timestamp=self._clock(),
            )

            async with self._lock:
                self.state.ledger.append(record)
            logger.debug(f"Commission {record.id} reached {CalculationStage.RECORDED.value}")

        except CommissionError as e:
            logger.error(f"Commission calculation error: {e}")
            raise

        logger.info(
            f"Commission {record.id} for affiliate {record.affiliate_id}: "
            f"{record.amount} -> {record.total_commission} ({record.commission_rate}%)"
        )
        await self.events.publish(CommissionCalculated(record=record, timestamp=self._clock()))
        return record

    async def track_commission(
        self,
        affiliate_id: str,
        transaction_data: Any,
    ) -> CommissionRecord:
        """
        Record the commission of a completed transaction and update affiliate totals.

        The affiliate update is best effort: if it fails the commission stays
        recorded and an AffiliateStatsUpdateFailed event is published.

        Args:
            affiliate_id: Affiliate earning the commission
            transaction_data: TransactionData or dict with amount, transaction_id,
                optional customer_id, product_id and options

        Returns:
            The recorded CommissionRecord
        """
        try:
            if isinstance(transaction_data, TransactionData):
                transaction_data = transaction_data.model_dump()
            request = validate_input(
                TrackCommissionRequest,
                affiliate_id=affiliate_id,
                transaction_data=transaction_data,
            )
        except CommissionError as e:
            logger.error(f"Commission tracking error: {e}")
            raise

        transaction = request.transaction_data
        commission = await self.calculate_commission(
            request.affiliate_id,
            transaction.amount,
            transaction.options,
        )

        await self._update_affiliate_stats(request.affiliate_id, transaction, commission)

        await self.events.publish(
            CommissionTracked(
                affiliate_id=request.affiliate_id,
                transaction=transaction,
                commission=commission,
                timestamp=self._clock(),
            )
        )
        return commission

    async def get_commission_history(
        self,
        affiliate_id: str,
        options: Optional[dict[str, Any]] = None,
    ) -> CommissionHistory:
        """
        Paginated history, newest first.

        Args:
            options: start_date, end_date (inclusive), limit (1-1000), offset
        """
        affiliate_id, query = self._validate_history(affiliate_id, options)
        page = self.state.ledger.query(
            affiliate_id,
            start_date=query.start_date,
            end_date=query.end_date,
            limit=query.limit,
            offset=query.offset,
        )
        return CommissionHistory(
            affiliate_id=affiliate_id,
            history=page.records,
            total=page.total,
            pagination=Pagination(
                limit=page.limit,
                offset=page.offset,
                has_more=page.has_more,
            ),
        )

    async def get_commission_stats(
        self,
        affiliate_id: str,
        options: Optional[dict[str, Any]] = None,
    ) -> CommissionStats:
        """
        Statistics over the 1000 most recent records matching the date range.

        In multi-tier mode tier_info carries the affiliate's current tier.
        """
        affiliate_id, query = self._validate_history(affiliate_id, options)
        page = self.state.ledger.query(
            affiliate_id,
            start_date=query.start_date,
            end_date=query.end_date,
            limit=MAX_LIMIT,
            offset=0,
        )
        stats = self.aggregator.summarize(page.records)

        if self.settings.multi_tier:
            affiliate = await self._get_affiliate(affiliate_id)
            stats.tier_info = self.state.tiers.get_tier(affiliate.tier)

        return stats

    # ── Tiers ─────────────────────────────────────────────

    async def update_tier_structure(self, new_tiers: list[Any]) -> TierUpdateResult:
        """
        Replace the tier structure. Existing records are not touched.

        Raises:
            ValidationError: invalid tiers; the previous structure stays
        """
        try:
            async with self._lock:
                tiers = self.state.tiers.set_tiers(new_tiers)
                self._configured_tiers = tiers
        except CommissionError as e:
            logger.error(f"Update tier structure error: {e}")
            raise

        logger.info(f"Tier structure updated: {len(tiers)} tiers")
        await self.events.publish(
            TierStructureUpdated(tiers=tuple(tiers), timestamp=self._clock())
        )
        return TierUpdateResult(success=True, tiers=tiers)

    def get_tier_structure(self) -> list[TierDefinition]:
        return self.state.tiers.list_tiers()

    # ── Lifecycle ─────────────────────────────────────────

    def get_status(self) -> dict[str, Any]:
        return {
            "initialized": self.is_initialized,
            "multi_tier": self.settings.multi_tier,
            "calculation": self.settings.calculation,
            "tiers": len(self.state.tiers),
            "records": len(self.state.ledger),
            "timestamp": self._clock(),
        }

    async def shutdown(self) -> None:
        """Drop all records and tiers."""
        logger.info("Shutting down Commission Engine")
        async with self._lock:
            self.state.ledger.clear()
            self.state.tiers.clear()
            self.is_initialized = False
        await self.events.publish(EngineShutdown(timestamp=self._clock()))

    # ── Internals ─────────────────────────────────────────

    def _validate_history(
        self,
        affiliate_id: str,
        options: Optional[dict[str, Any]],
    ) -> tuple[str, HistoryQuery]:
        try:
            request = validate_input(
                HistoryRequest,
                affiliate_id=affiliate_id,
                options={} if options is None else options,
            )
        except CommissionError as e:
            logger.error(f"Commission history query error: {e}")
            raise
        return request.affiliate_id, request.options

    async def _get_affiliate(self, affiliate_id: str) -> AffiliateSnapshot:
        """
        Resolve the affiliate snapshot.

        Falls back to a neutral snapshot (no tier, no prior sales) when the
        provider is missing, fails or does not know the affiliate, unless
        require_known_affiliate is set.
        """
        if self._affiliates is None:
            return AffiliateSnapshot.neutral(affiliate_id)

        try:
            affiliate = await self._affiliates.get(affiliate_id)
        except NotFoundError:
            if self.settings.require_known_affiliate:
                raise
            logger.warning(f"Affiliate {affiliate_id} not found, using defaults")
            return AffiliateSnapshot.neutral(affiliate_id)
        except Exception as e:
            logger.warning(f"Affiliate lookup failed for {affiliate_id}, using defaults: {e}")
            return AffiliateSnapshot.neutral(affiliate_id)

        if affiliate is None:
            if self.settings.require_known_affiliate:
                raise NotFoundError(f"Affiliate {affiliate_id} not found")
            logger.warning(f"Affiliate {affiliate_id} not found, using defaults")
            return AffiliateSnapshot.neutral(affiliate_id)

        return affiliate

    async def _update_affiliate_stats(
        self,
        affiliate_id: str,
        transaction: TransactionData,
        commission: CommissionRecord,
    ) -> None:
        if self._stats_updater is None:
            logger.debug(f"No stats updater configured, skipping totals for {affiliate_id}")
            return

        try:
            await self._stats_updater.notify(
                affiliate_id,
                transaction.amount,
                commission.total_commission,
            )
        except Exception as e:
            logger.error(
                f"Affiliate stats update failed for {affiliate_id} "
                f"(commission {commission.id} kept): {e}"
            )
            await self.events.publish(
                AffiliateStatsUpdateFailed(
                    affiliate_id=affiliate_id,
                    commission_id=commission.id,
                    error=str(e),
                    timestamp=self._clock(),
                )
            )
