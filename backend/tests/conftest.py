"""
DevCamper API - Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the test suite.
How:   Every test gets its own in-memory SQLite database (aiosqlite,
       StaticPool so all sessions share one connection). HTTP tests drive
       the real FastAPI app through httpx's ASGITransport with the session,
       geocoder and file store dependencies overridden.

Fixture Hierarchy (all function-scoped):
    db_engine ──▶ session_factory ──┬──▶ db_session
                                    ├──▶ seeded (4 bootcamps, 3 courses)
                                    └──▶ test_client
    fake_geocoder, upload_dir, file_service, credentials
"""

import os
import tempfile

# Settings are read on first import of devcamper; set the environment before that
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["GEOCODER_API_KEY"] = "test-key-not-real"
os.environ["FILE_UPLOAD_PATH"] = tempfile.mkdtemp(prefix="devcamper_test_")
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from typing import Dict, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import devcamper.models  # noqa: F401
from devcamper.config import Settings
from devcamper.database import Base, get_db_session
from devcamper.dependencies import get_file_service, get_geocoder
from devcamper.models import Bootcamp, Course
from devcamper.services.credentials import CredentialService
from devcamper.services.file_service import FileService
from devcamper.services.geocoder import GeocodeResult, GeocoderService


# ══════════════════════════════════════════════════════════════════════════
# Fakes
# ══════════════════════════════════════════════════════════════════════════

BOSTON = GeocodeResult(
    latitude=42.3406,
    longitude=-71.0725,
    formatted_address="233 Bay State Rd, Boston, MA 02118, US",
    street="233 Bay State Rd",
    city="Boston",
    state="MA",
    zipcode="02118",
    country="US",
)

FRAMINGHAM = GeocodeResult(
    latitude=42.28,
    longitude=-71.42,
    formatted_address="220 Pawtucket St, Framingham, MA 01702, US",
    street="220 Pawtucket St",
    city="Framingham",
    state="MA",
    zipcode="01702",
    country="US",
)


class FakeGeocoder(GeocoderService):
    """Answers from a fixed table; unknown queries resolve to nothing."""

    def __init__(self, table: Dict[str, List[GeocodeResult]]):
        self.table = table
        self.queries: List[str] = []

    async def geocode(self, query: str) -> List[GeocodeResult]:
        self.queries.append(query)
        return list(self.table.get(query, []))


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder(
        {
            "02118": [BOSTON],
            "233 Bay State Rd Boston MA 02118": [BOSTON],
            "220 Pawtucket St, Framingham MA 01702": [FRAMINGHAM],
        }
    )


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def _bootcamp(name, created_at, careers, location, **fields) -> Bootcamp:
    bootcamp = Bootcamp(
        name=name,
        slug=name.lower().replace(" ", "-"),
        description=f"{name} description",
        created_at=created_at,
        latitude=location[0],
        longitude=location[1],
        city=location[2],
        state=location[3],
        formatted_address=f"{location[2]}, {location[3]}",
        **fields,
    )
    bootcamp.careers = careers
    return bootcamp


@pytest_asyncio.fixture
async def seeded(session_factory) -> Dict[str, Bootcamp]:
    """
    Four bootcamps (oldest first) and three courses, committed.

        Devworks Bootcamp    Boston MA       cost 10000  housing
        ModernTech Bootcamp  Framingham MA   cost 12000
        Codemasters          Kingston RI     cost  8000
        Devcentral Bootcamp  San Francisco   cost 15000  housing
    """
    t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
    bootcamps = [
        _bootcamp(
            "Devworks Bootcamp",
            t0,
            ["Web Development", "UI/UX", "Business"],
            (42.35, -71.06, "Boston", "MA"),
            average_cost=10000,
            average_rating=8,
            housing=True,
            job_assistance=True,
        ),
        _bootcamp(
            "ModernTech Bootcamp",
            t0 + timedelta(days=1),
            ["Web Development", "UI/UX", "Mobile Development"],
            (42.28, -71.42, "Framingham", "MA"),
            average_cost=12000,
            average_rating=6,
        ),
        _bootcamp(
            "Codemasters",
            t0 + timedelta(days=2),
            ["Web Development", "Data Science", "Business"],
            (41.48, -71.52, "Kingston", "RI"),
            average_cost=8000,
            average_rating=7,
        ),
        _bootcamp(
            "Devcentral Bootcamp",
            t0 + timedelta(days=3),
            ["Mobile Development", "Web Development", "Data Science", "Business"],
            (37.77, -122.42, "San Francisco", "CA"),
            average_cost=15000,
            average_rating=9,
            housing=True,
        ),
    ]

    async with session_factory() as session:
        session.add_all(bootcamps)
        await session.flush()
        devworks = bootcamps[0]
        session.add_all(
            [
                Course(
                    title="Front End Web Development",
                    description="HTML, CSS and JavaScript",
                    weeks="8",
                    tuition=8000,
                    minimum_skill="beginner",
                    bootcamp_id=devworks.id,
                    created_at=t0,
                ),
                Course(
                    title="Full Stack Web Development",
                    description="Node, databases and deployment",
                    weeks="12",
                    tuition=12000,
                    minimum_skill="intermediate",
                    scholarship_available=True,
                    bootcamp_id=devworks.id,
                    created_at=t0 + timedelta(hours=1),
                ),
                Course(
                    title="Data Science Program",
                    description="Python, statistics and machine learning",
                    weeks="10",
                    tuition=9000,
                    minimum_skill="advanced",
                    bootcamp_id=bootcamps[2].id,
                    created_at=t0 + timedelta(hours=2),
                ),
            ]
        )
        await session.commit()
    return {b.name: b for b in bootcamps}


# ══════════════════════════════════════════════════════════════════════════
# Collaborators
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(upload_dir):
    return Settings(file_upload_path=str(upload_dir), max_file_upload=1000)


@pytest.fixture
def file_service(test_settings):
    return FileService(test_settings)


@pytest.fixture
def credentials(test_settings):
    return CredentialService(test_settings)


@pytest.fixture
def sample_image_bytes():
    """Smallest JPEG: SOI + JFIF header + EOI."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory, fake_geocoder, file_service):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from devcamper.main import app

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_geocoder] = lambda: fake_geocoder
    app.dependency_overrides[get_file_service] = lambda: file_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
