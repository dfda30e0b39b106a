"""
Engine lifecycle events and an in-process event bus.

Handlers subscribe by event class (subclasses match) or by event name,
e.g. "commissionCalculated". Delivery follows subscription order and is
awaited before the emitting operation returns. A failing handler is logged
and skipped; it never aborts the operation that emitted the event.
"""

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, ClassVar, Optional, Union

from commission_ledger.schemas.commission import CommissionRecord, TransactionData
from commission_ledger.schemas.tier import TierDefinition
from commission_ledger.utils.dates import utcnow

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


@dataclass(frozen=True, kw_only=True)
class EngineEvent:
    """Base engine event."""
    name: ClassVar[str] = "event"
    timestamp: datetime = field(default_factory=utcnow)


@dataclass(frozen=True, kw_only=True)
class EngineInitialized(EngineEvent):
    name: ClassVar[str] = "initialized"


@dataclass(frozen=True, kw_only=True)
class CommissionCalculated(EngineEvent):
    name: ClassVar[str] = "commissionCalculated"
    record: CommissionRecord


@dataclass(frozen=True, kw_only=True)
class CommissionTracked(EngineEvent):
    name: ClassVar[str] = "commissionTracked"
    affiliate_id: str
    transaction: TransactionData
    commission: CommissionRecord


@dataclass(frozen=True, kw_only=True)
class TierStructureUpdated(EngineEvent):
    name: ClassVar[str] = "tierStructureUpdated"
    tiers: tuple[TierDefinition, ...]


@dataclass(frozen=True, kw_only=True)
class AffiliateStatsUpdateFailed(EngineEvent):
    """The recorded commission stays; affiliate totals need reconciliation."""
    name: ClassVar[str] = "affiliateStatsUpdateFailed"
    affiliate_id: str
    commission_id: str
    error: str


@dataclass(frozen=True, kw_only=True)
class EngineShutdown(EngineEvent):
    name: ClassVar[str] = "shutdown"


EVENT_TYPES: dict[str, type[EngineEvent]] = {
    cls.name: cls
    for cls in (
        EngineInitialized,
        CommissionCalculated,
        CommissionTracked,
        TierStructureUpdated,
        AffiliateStatsUpdateFailed,
        EngineShutdown,
    )
}


class EventBus:
    """In-process publish/subscribe for engine events."""

    def __init__(self) -> None:
        self._subscriptions: list[tuple[type[EngineEvent], Handler]] = []

    def subscribe(
        self,
        event_type: Union[type[EngineEvent], str],
        handler: Handler,
    ) -> Callable[[], None]:
        """
        Register a sync or async handler.

        Args:
            event_type: Event class or event name
            handler: Called with the event instance

        Returns:
            Callable that removes this subscription
        """
        if isinstance(event_type, str):
            try:
                event_type = EVENT_TYPES[event_type]
            except KeyError:
                raise ValueError(f"Unknown event name: {event_type}") from None

        subscription = (event_type, handler)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    async def publish(self, event: EngineEvent) -> int:
        """
        Deliver an event to matching handlers.

        Returns:
            Number of handlers that completed without error
        """
        delivered = 0
        for event_type, handler in list(self._subscriptions):
            if not isinstance(event, event_type):
                continue
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.error(f"Handler for '{event.name}' event failed: {e}", exc_info=True)
        return delivered

    def handler_count(self, event_type: Optional[type[EngineEvent]] = None) -> int:
        if event_type is None:
            return len(self._subscriptions)
        return sum(1 for registered, _ in self._subscriptions if issubclass(event_type, registered))
