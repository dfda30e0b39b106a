"""
Pytest configuration and fixtures.
"""

from decimal import Decimal
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from commission_ledger.config import CommissionSettings
from commission_ledger.models import Base
from commission_ledger.schemas.affiliate import AffiliateSnapshot


# Test database (file-backed SQLite per test, so concurrent sessions get
# separate connections instead of sharing one StaticPool connection)
@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Create test database engine."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False, poolclass=NullPool
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session


class StubAffiliates:
    """In-memory affiliate provider/updater for engine tests."""

    def __init__(self, *snapshots: AffiliateSnapshot):
        self.snapshots = {s.id: s for s in snapshots}
        self.notifications: list[tuple[str, Decimal, Decimal]] = []
        self.fail_get = False
        self.fail_notify = False

    def add(self, snapshot: AffiliateSnapshot) -> AffiliateSnapshot:
        self.snapshots[snapshot.id] = snapshot
        return snapshot

    async def get(self, affiliate_id: str) -> Optional[AffiliateSnapshot]:
        if self.fail_get:
            raise ConnectionError("affiliate store unavailable")
        return self.snapshots.get(affiliate_id)

    async def notify(self, affiliate_id: str, amount_delta: Decimal, commission_delta: Decimal) -> None:
        if self.fail_notify:
            raise ConnectionError("affiliate store unavailable")
        self.notifications.append((affiliate_id, amount_delta, commission_delta))


@pytest.fixture
def flat_settings():
    """Flat 10% with no bonuses and no clamp."""
    return CommissionSettings(
        multi_tier=False,
        rate=Decimal("10"),
        minimum=Decimal("0"),
        maximum=Decimal("0"),
        volume_bonuses=[],
    )


@pytest.fixture
def tiered_settings():
    """Bronze/Silver/Gold tiers, one 10% bonus at 10000, no clamp."""
    return CommissionSettings(
        multi_tier=True,
        rate=Decimal("10"),
        minimum=Decimal("0"),
        maximum=Decimal("0"),
        tiers=[
            {"level": 1, "rate": 10, "name": "Bronze"},
            {"level": 2, "rate": 15, "name": "Silver"},
            {"level": 3, "rate": 20, "name": "Gold"},
        ],
        volume_bonuses=[{"threshold": 10000, "bonus": 10}],
    )


@pytest.fixture
def affiliates():
    """Empty stub directory; tests register snapshots with add()."""
    return StubAffiliates()
