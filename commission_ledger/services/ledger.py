"""
Append-only commission ledger.

Records are indexed by affiliate and by the UTC day of their timestamp.
A query always reconstructs the full affiliate history from the day buckets.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from commission_ledger.errors import InvariantViolation
from commission_ledger.schemas.commission import CommissionRecord
from commission_ledger.utils.dates import day_bucket, ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000


@dataclass(frozen=True)
class LedgerPage:
    """One page of query results plus pagination metadata."""
    records: list[CommissionRecord]
    total: int
    limit: int
    offset: int
    has_more: bool


def clamp_limit(limit: int) -> int:
    return max(1, min(limit, MAX_LIMIT))


def clamp_offset(offset: int) -> int:
    return max(0, offset)


class CommissionLedger:
    """In-memory ledger. No internal locking; writers are serialized by the engine."""

    def __init__(self) -> None:
        self._records: dict[str, CommissionRecord] = {}
        self._sequence: dict[str, int] = {}
        self._by_affiliate: dict[str, dict[date, list[CommissionRecord]]] = {}

    def append(self, record: CommissionRecord) -> None:
        """
        Add a record.

        Raises:
            InvariantViolation: a record with the same id already exists;
                nothing is written
        """
        if record.id in self._records:
            raise InvariantViolation(f"Duplicate commission record id {record.id}")

        days = self._by_affiliate.setdefault(record.affiliate_id, {})
        days.setdefault(day_bucket(record.timestamp), []).append(record)
        self._sequence[record.id] = len(self._sequence)
        self._records[record.id] = record

    def get(self, record_id: str) -> Optional[CommissionRecord]:
        return self._records.get(record_id)

    def for_day(self, affiliate_id: str, day: date) -> list[CommissionRecord]:
        """Records of one affiliate on one UTC day, in insertion order."""
        return list(self._by_affiliate.get(affiliate_id, {}).get(day, []))

    def query(
        self,
        affiliate_id: str,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> LedgerPage:
        """
        Records of an affiliate, newest first.

        Equal timestamps keep insertion order. Date bounds are inclusive.
        limit is clamped to [1, 1000], offset to >= 0.
        """
        limit = clamp_limit(limit)
        offset = clamp_offset(offset)
        start = ensure_utc(start_date) if start_date else None
        end = ensure_utc(end_date) if end_date else None

        matching: list[CommissionRecord] = []
        for day, records in self._by_affiliate.get(affiliate_id, {}).items():
            if start and day < start.date():
                continue
            if end and day > end.date():
                continue
            for record in records:
                if start and record.timestamp < start:
                    continue
                if end and record.timestamp > end:
                    continue
                matching.append(record)

        matching.sort(key=lambda r: self._sequence[r.id])
        matching.sort(key=lambda r: r.timestamp, reverse=True)

        total = len(matching)
        return LedgerPage(
            records=matching[offset:offset + limit],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        )

    def clear(self) -> None:
        count = len(self._records)
        self._records.clear()
        self._sequence.clear()
        self._by_affiliate.clear()
        logger.debug(f"Ledger cleared ({count} records dropped)")

    def __len__(self) -> int:
        return len(self._records)
