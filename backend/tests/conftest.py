"""Root conftest — shared test configuration, profile records and SQLite fixtures.

Design Decisions:
    - SQLite in-memory: fast, no external dependency; PostgreSQL-only SQL
      (JSONB ?|) is checked by compiling statements, not by executing them
    - seeded_db adds one legacy row whose specialties were stored as a JSON string
"""

import os

# Ensure tests never reach a real database or leak development detail by default
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

import directory_api.models  # noqa: E402,F401
from directory_api.db.base import Base  # noqa: E402
from directory_api.infrastructure.database import DatabaseSessionManager  # noqa: E402
from directory_api.models.profile import Profile  # noqa: E402
from tests.profile_factory import make_record  # noqa: E402


@pytest.fixture
def directory_records():
    """Six profiles covering every filter dimension."""
    return [
        make_record(1, "Jan", "Kowalski", "Austin", "MD",
                    ("Trauma", "PTSD"), 2),
        make_record(2, "Janet", "Brown", "Dallas", "PhD",
                    ("Bipolar", "LGBTQ"), 5),
        make_record(3, "Omar", "Haddad", "Boston", "MSW",
                    ("PTSD", "Eating disorders"), 9),
        make_record(4, "alice", "O'Brien", "austin", "MD",
                    ("Trauma",), 12),
        make_record(5, "Bob", "Smith", "Dallas", "MSW",
                    (), 20),
        make_record(6, "Carla", "Diaz", "Boston", "PhD",
                    ("LGBTQ", "Grief"), 15),
    ]


# ─── SQL fixtures (in-memory SQLite) ─────────────────────────────

@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
async def seeded_db(db_manager, directory_records):
    """directory_records persisted, plus a legacy row (id 7) with stringified specialties."""
    async with db_manager.session("seed") as session:
        for r in directory_records:
            session.add(Profile(
                id=r.id,
                first_name=r.first_name,
                last_name=r.last_name,
                city=r.city,
                degree=r.degree,
                specialties=list(r.specialties),
                years_of_experience=r.years_of_experience,
                phone_number=r.phone_number,
            ))
        session.add(Profile(
            id=7, first_name="Legacy", last_name="Row", city="Chicago",
            degree="MD", specialties='["Grief", "Trauma"]',
            years_of_experience=30, phone_number=5550000000,
        ))
        await session.commit()
    return db_manager
