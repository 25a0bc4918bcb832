"""Shared fixtures and utilities for tests."""

import os

# Must be set before any application module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./coachbook_test.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ["CACHE_ENABLED"] = "false"
os.environ["SEED_INITIAL_DATA"] = "false"
os.environ["JSON_LOGS"] = "false"

import asyncio
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from database.engine import Base
from database.models import (
    Coach,
    QuestionType,
    QuizQuestion,
    SeniorityLevel,
    Slot,
    User,
)


# Fixed query time for deterministic availability windows
NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def _engine(path):
    # NullPool: connections never outlive the event loop that opened them
    return create_async_engine(
        f"sqlite+aiosqlite:///{path}",
        poolclass=NullPool,
        connect_args={"timeout": 5},
    )


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite engine so concurrent sessions share one database."""
    engine = _engine(tmp_path / "test.db")
    await _create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


async def create_catalog(factory, start: datetime = NOW) -> SimpleNamespace:
    """
    Insert a user, one coach per seniority tier and a few slots.

    Slots start on the day after ``start``.
    """
    base = (start + timedelta(days=1)).replace(minute=0, second=0, microsecond=0)

    async with factory() as session:
        user = User(email="asha@example.com", name="Asha", timezone="Asia/Kolkata")
        senior = Coach(
            name="Dr. Meera Senior",
            specialization="Trichology",
            seniority_level=SeniorityLevel.SENIOR.value,
            languages=["en", "hi"],
        )
        mid = Coach(
            name="Kabir Mid",
            specialization="Nutrition",
            seniority_level=SeniorityLevel.MID.value,
            languages=["hi"],
        )
        junior = Coach(
            name="Isha Junior",
            specialization="Hair care",
            seniority_level=SeniorityLevel.JUNIOR.value,
            languages=["en"],
        )
        slots = [
            Slot(coach=senior, start_time=base, end_time=base + timedelta(hours=1), timezone="Asia/Kolkata"),
            Slot(coach=senior, start_time=base + timedelta(hours=2), end_time=base + timedelta(hours=3), timezone="Asia/Kolkata"),
            Slot(coach=mid, start_time=base + timedelta(hours=1), end_time=base + timedelta(hours=2), timezone="Asia/Kolkata"),
            Slot(coach=junior, start_time=base + timedelta(hours=4), end_time=base + timedelta(hours=5), timezone="Asia/Kolkata"),
        ]
        session.add_all([user, senior, mid, junior, *slots])
        await session.commit()

        return SimpleNamespace(
            user_id=user.id,
            senior_id=senior.id,
            mid_id=mid.id,
            junior_id=junior.id,
            slot_ids=[slot.id for slot in slots],
            base=base,
        )


async def create_questions(factory) -> list[str]:
    """Insert three quiz questions, the first with a Hindi overlay."""
    async with factory() as session:
        session.add_all(
            [
                QuizQuestion(
                    question_id="stress_level",
                    question_text="How would you rate your stress level?",
                    question_type=QuestionType.RADIO.value,
                    options=[{"value": "low", "label": "Low"}, {"value": "high", "label": "High"}],
                    translations={
                        "question_text": {"hi": "आप अपने तनाव के स्तर को कैसे आंकेंगे?"},
                        "options": {"hi": [{"value": "low", "label": "कम"}, {"value": "high", "label": "ज़्यादा"}]},
                    },
                    order_index=1,
                ),
                QuizQuestion(
                    question_id="age",
                    question_text="How old are you?",
                    question_type=QuestionType.NUMBER.value,
                    order_index=2,
                ),
                QuizQuestion(
                    question_id="medical_history",
                    question_text="Have you been diagnosed with any of these conditions?",
                    question_type=QuestionType.CHECKBOX.value,
                    options=[{"value": "pcos", "label": "PCOS"}, {"value": "thyroid", "label": "Thyroid"}],
                    order_index=3,
                ),
            ]
        )
        await session.commit()
    return ["stress_level", "age", "medical_history"]


@pytest_asyncio.fixture
async def catalog(session_factory):
    return await create_catalog(session_factory)


@pytest.fixture
def api_session_factory(tmp_path):
    """Session factory for TestClient tests, which run on their own event loop."""
    engine = _engine(tmp_path / "api.db")
    asyncio.run(_create_tables(engine))
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(api_session_factory):
    """TestClient with ``get_db`` bound to the temporary database; lifespan is not run."""
    from fastapi.testclient import TestClient

    from api.main import app
    from database.engine import get_db

    async def override_get_db():
        async with api_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def api_catalog(api_session_factory):
    """Catalog relative to the real clock, since endpoints query at the current time."""
    return asyncio.run(create_catalog(api_session_factory, datetime.now(timezone.utc)))
