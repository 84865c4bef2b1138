"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from decimal import Decimal

from app.config.database import create_engine, create_session_maker, init_models
from app.models import Plan, User


TEST_PLAN = "BASIC"
TEST_PAYOUT = Decimal("100")


@pytest.fixture
async def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    """Session maker bound to the test engine."""
    return create_session_maker(engine)


@pytest.fixture
async def session(session_maker):
    """Async session for the code under test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def plan(session):
    """BASIC plan paying 100 on completion."""
    plan = Plan(name=TEST_PLAN, payout=TEST_PAYOUT)
    session.add(plan)
    await session.commit()
    return plan


@pytest.fixture
def make_user(session):
    """Factory creating committed users."""

    async def _make_user(plan: str = TEST_PLAN, **fields) -> User:
        user = User(plan=plan, **fields)
        session.add(user)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_users(make_user):
    """Factory creating several users of one plan."""

    async def _make_users(count: int, plan: str = TEST_PLAN) -> list[User]:
        return [await make_user(plan=plan) for _ in range(count)]

    return _make_users
