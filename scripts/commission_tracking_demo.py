"""
Commission tracking walkthrough.

Usage:
    python scripts/commission_tracking_demo.py

Or against a real affiliate database:
    COMMISSION_DATABASE_URL="postgresql://..." python scripts/commission_tracking_demo.py

This script:
- Creates three affiliates (tiers 1-3) in a database
- Tracks a series of transactions for each of them
- Prints commission stats and recent history
- Replaces the tier structure
"""

import asyncio
import logging
import os
import sys
from decimal import Decimal

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from commission_ledger import CommissionEngine, CommissionSettings
from commission_ledger.db import create_engine, create_session_factory, session_scope
from commission_ledger.models import Affiliate, Base
from commission_ledger.services import SqlAffiliateDirectory

DATABASE_URL = os.environ.get("COMMISSION_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

TRANSACTIONS = [
    {"amount": 500, "product": "Product A"},
    {"amount": 1200, "product": "Product B"},
    {"amount": 800, "product": "Product C"},
    {"amount": 2000, "product": "Product D"},
    {"amount": 1500, "product": "Product E"},
]

NEW_TIERS = [
    {"level": 1, "rate": 12, "name": "Bronze Plus"},
    {"level": 2, "rate": 18, "name": "Silver Plus"},
    {"level": 3, "rate": 25, "name": "Gold Plus"},
    {"level": 4, "rate": 30, "name": "Platinum"},
]


async def main() -> None:
    settings = CommissionSettings.from_options({
        "multiTier": True,
        "calculation": "percentage",
        "rate": 10,
        "maximum": 0,
        "databaseUrl": DATABASE_URL,
    })

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger("commission_tracking_demo")

    db_engine = create_engine(settings.database_url)
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = create_session_factory(db_engine)

    directory = SqlAffiliateDirectory(session_factory)
    engine = CommissionEngine(settings, affiliates=directory, stats_updater=directory)
    engine.events.subscribe(
        "commissionTracked",
        lambda event: logger.debug(f"Tracked {event.transaction.transaction_id}"),
    )
    await engine.initialize()

    try:
        affiliates = []
        async with session_scope(session_factory) as db:
            for i in range(1, 4):
                affiliate = Affiliate(
                    name=f"Affiliate {i}",
                    email=f"affiliate{i}@example.com",
                    tier=i,
                    total_sales=Decimal(i * 2000),
                )
                db.add(affiliate)
                affiliates.append(affiliate)
        logger.info(f"Created {len(affiliates)} affiliates")

        for affiliate in affiliates:
            for i, tx in enumerate(TRANSACTIONS, start=1):
                commission = await engine.track_commission(affiliate.id, {
                    "amount": tx["amount"],
                    "transaction_id": f"TXN{affiliate.id}_{i}",
                    "customer_id": f"CUST{i}",
                    "product_id": tx["product"],
                    "options": {"product": tx["product"], "category": "electronics"},
                })
                print(
                    f"  {affiliate.name} {tx['product']}: ${tx['amount']} -> "
                    f"${commission.total_commission:.2f} ({commission.commission_rate}%)"
                )

            stats = await engine.get_commission_stats(affiliate.id)
            print(f"\nCommission summary for {affiliate.name}:")
            print(f"  Total commissions: ${stats.total_commissions:.2f}")
            print(f"  Total sales: ${stats.total_amount:.2f}")
            print(f"  Average commission: ${stats.average_commission:.2f}")
            print(f"  Commission count: {stats.commission_count}")
            if stats.tier_info:
                print(f"  Tier: {stats.tier_info.name} (level {stats.tier_info.level})")

        gold = affiliates[2]
        large = await engine.calculate_commission(gold.id, 15000, {"productId": "Premium Product"})
        print(f"\nLarge transaction for {gold.name}:")
        print(f"  Base commission ({large.commission_rate}%): ${large.base_commission:.2f}")
        print(f"  Volume bonus: ${large.volume_bonus:.2f}")
        print(f"  Total commission: ${large.total_commission:.2f}")

        for affiliate in affiliates:
            history = await engine.get_commission_history(affiliate.id, {"limit": 5})
            print(f"\n{affiliate.name} ({history.total} total commissions):")
            for record in history.history[:3]:
                print(
                    f"  {record.timestamp.date().isoformat()}: "
                    f"${record.amount} -> ${record.total_commission:.2f}"
                )

        result = await engine.update_tier_structure(NEW_TIERS)
        print("\nUpdated tier structure:")
        for tier in result.tiers:
            print(f"  Level {tier.level}: {tier.name} ({tier.rate}%)")

    finally:
        await engine.shutdown()
        await db_engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
