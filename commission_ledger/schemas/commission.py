"""
Commission schemas: engine inputs, ledger records and history responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from commission_ledger.utils.dates import ensure_utc


class CommissionRequest(BaseModel):
    """Input of calculate_commission."""

    affiliate_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    options: dict[str, Any] = Field(default_factory=dict)


class TransactionData(BaseModel):
    """A completed sale reported for commission tracking."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: Decimal = Field(..., gt=0)
    transaction_id: str = Field(..., min_length=1)
    customer_id: Optional[str] = None
    product_id: Optional[str] = None
    options: dict[str, Any] = Field(default_factory=dict)


class TrackCommissionRequest(BaseModel):
    """Input of track_commission."""

    affiliate_id: str = Field(..., min_length=1)
    transaction_data: TransactionData


class HistoryQuery(BaseModel):
    """
    Filters for history and stats queries.

    Dates are inclusive. Naive datetimes are read as UTC.
    limit/offset are clamped by the ledger, not rejected.
    """

    model_config = ConfigDict(extra="forbid")

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = 100
    offset: int = 0

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return v
        return ensure_utc(v)


class HistoryRequest(BaseModel):
    """Input of get_commission_history and get_commission_stats."""

    affiliate_id: str = Field(..., min_length=1)
    options: HistoryQuery = Field(default_factory=HistoryQuery)


class CommissionRecord(BaseModel):
    """
    One computed commission. Immutable once created.

    base_commission is always amount * commission_rate / 100;
    total_commission is the clamped sum of base, volume and tier bonuses.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    affiliate_id: str
    amount: Decimal
    commission_rate: Decimal
    base_commission: Decimal
    volume_bonus: Decimal
    tier_bonus: Decimal
    total_commission: Decimal
    timestamp: datetime
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class Pagination(BaseModel):
    limit: int
    offset: int
    has_more: bool


class CommissionHistory(BaseModel):
    """Paginated commission history of one affiliate, newest first."""

    affiliate_id: str
    history: list[CommissionRecord]
    total: int
    pagination: Pagination
