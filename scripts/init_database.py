#!/usr/bin/env python3
"""Initialize database tables and seed plans.

Usage:
    python scripts/init_database.py BASIC=50 PREMIUM=250
"""

import asyncio
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger
from sqlalchemy import select

from app.config.database import create_engine, create_session_maker, init_models
from app.config.logging import setup_logging
from app.models import Plan


def parse_plans(args: list[str]) -> dict[str, Decimal]:
    """Parse NAME=PAYOUT arguments."""
    plans: dict[str, Decimal] = {}
    for arg in args:
        name, sep, payout = arg.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected NAME=PAYOUT, got {arg!r}")
        try:
            plans[name] = Decimal(payout)
        except InvalidOperation as e:
            raise ValueError(f"Invalid payout for plan {name}: {payout!r}") from e
    return plans


async def init_database(plans: dict[str, Decimal]) -> None:
    """Create all database tables and upsert plans."""
    logger.info("Connecting to database...")
    engine = create_engine()

    logger.info("Creating tables (checkfirst=True)...")
    await init_models(engine)

    session_maker = create_session_maker(engine)
    async with session_maker() as session:
        for name, payout in plans.items():
            result = await session.execute(select(Plan).where(Plan.name == name))
            plan = result.scalar_one_or_none()
            if plan:
                plan.payout = payout
                logger.info(f"Plan {name} updated: payout={payout}")
            else:
                session.add(Plan(name=name, payout=payout))
                logger.info(f"Plan {name} created: payout={payout}")
        await session.commit()

    await engine.dispose()
    logger.success("Database initialized successfully!")


if __name__ == "__main__":
    setup_logging()
    try:
        seed = parse_plans(sys.argv[1:])
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    asyncio.run(init_database(seed))
