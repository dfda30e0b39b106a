"""
Tier registry: the current commission tier structure.

Replaced wholesale by administrative updates; the new structure only affects
calculations made after the replacement.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from commission_ledger.errors import ValidationError
from commission_ledger.schemas.tier import TierDefinition
from commission_ledger.utils.validation import validate_list

logger = logging.getLogger(__name__)

TierListener = Callable[[list[TierDefinition]], Any]


class TierRegistry:
    """Holds tier definitions keyed by level, in insertion order."""

    def __init__(self, tiers: Optional[Iterable[Any]] = None):
        self._tiers: dict[int, TierDefinition] = {}
        self._listeners: list[TierListener] = []
        if tiers is not None:
            self.set_tiers(tiers)

    def set_tiers(self, tiers: Iterable[Any]) -> list[TierDefinition]:
        """
        Validate and atomically replace the whole tier set.

        Args:
            tiers: TierDefinition instances or dicts with level/rate/name/bonus

        Returns:
            The new tier list

        Raises:
            ValidationError: on an invalid tier or duplicate level; the
                current structure is left unchanged
        """
        validated: list[TierDefinition] = validate_list(
            TierDefinition, list(tiers), label="Invalid tier structure"
        )

        replacement: dict[int, TierDefinition] = {}
        for tier in validated:
            if tier.level in replacement:
                raise ValidationError(f"Invalid tier structure: duplicate level {tier.level}")
            replacement[tier.level] = tier

        self._tiers = replacement
        logger.debug(f"Tier structure replaced with {len(replacement)} tiers")

        snapshot = self.list_tiers()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Tier listener failed: {e}", exc_info=True)

        return snapshot

    def get_tier(self, level: Optional[int]) -> Optional[TierDefinition]:
        if level is None:
            return None
        return self._tiers.get(level)

    def list_tiers(self) -> list[TierDefinition]:
        """Copy of the tiers in insertion order."""
        return list(self._tiers.values())

    def add_listener(self, listener: TierListener) -> None:
        """Register a callback invoked with the new tier list after each replacement."""
        self._listeners.append(listener)

    def clear(self) -> None:
        self._tiers = {}

    def __len__(self) -> int:
        return len(self._tiers)
