"""
Affiliate model read by the commission engine.

Profile lifecycle (create/update/delete) is owned by the affiliate service;
the commission engine only reads tier and sales totals and bumps the totals
after a tracked commission.
"""

import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from commission_ledger.models.base import Base, TimestampMixin


class AffiliateStatus(str, Enum):
    """Affiliate account status."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


def generate_affiliate_id() -> str:
    return str(uuid.uuid4())


class Affiliate(Base, TimestampMixin):
    """Affiliate account with cumulative sales figures."""

    __tablename__ = "affiliates"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_affiliate_id,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=True,
    )
    tier: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Commission tier level, NULL means flat rate",
    )
    total_sales: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        default=Decimal("0"),
        server_default="0",
        nullable=False,
    )
    total_commissions: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        default=Decimal("0"),
        server_default="0",
        nullable=False,
    )
    status: Mapped[AffiliateStatus] = mapped_column(
        SQLAlchemyEnum(
            AffiliateStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=AffiliateStatus.ACTIVE,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Affiliate(id={self.id}, name='{self.name}', tier={self.tier})>"
