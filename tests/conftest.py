"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import datetime

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Background refresh stays off during tests; each test drives the cache itself
os.environ["CACHE_REFRESH_ENABLED"] = "false"

from pitchside.database import Base
from pitchside.models import PlayerStats, RoomLink, User
from pitchside.services import StoreGateway
from pitchside.utils.cache import CacheStore


API_BASE_URL = "http://test"


@pytest.fixture
async def test_engine(tmp_path):
    """Fresh SQLite database per test with the store schema created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Session used by tests to seed and inspect the store."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def cache():
    return CacheStore(ttl=420)


@pytest.fixture
def gateway(test_engine):
    return StoreGateway(test_engine)


@pytest.fixture
async def test_app(gateway, cache):
    """App wired to the per-test store and cache (lifespan is not run)."""
    from pitchside.main import app

    app.state.cache = cache
    app.state.gateway = gateway
    yield app


@pytest.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as http_client:
        yield http_client


@pytest.fixture
def player_factory(db_session):
    """Factory for seeding a user row with a matching stats row."""

    async def _create_player(
        auth: str | None = None,
        nicknames: list[str] | None = None,
        password: str = "TestPassword123!",
        *,
        with_stats: bool = True,
        is_vip: bool = False,
        vip_expires_at: datetime | None = None,
        vip_color: str | None = None,
        vip_message: str | None = None,
        vip_celebration: str | None = None,
        commit: bool = True,
        **stats,
    ) -> User:
        auth = auth or f"auth-{uuid.uuid4().hex[:12]}"
        user = User(
            auth=auth,
            nicknames=nicknames if nicknames is not None else [f"player_{auth[-6:]}"],
            password=password,
            is_vip=is_vip,
            vip_expires_at=vip_expires_at,
            vip_color=vip_color,
            vip_message=vip_message,
            vip_celebration=vip_celebration,
        )
        db_session.add(user)
        if with_stats:
            db_session.add(PlayerStats(auth=auth, **stats))
        if commit:
            await db_session.commit()
        return user

    return _create_player


@pytest.fixture
def ranked_players(db_session, player_factory):
    """Seed ``count`` ranked players (rank 1 has the most points)."""

    async def _seed(count: int) -> list[str]:
        auths = []
        # Insert in reverse rank order so ordering must come from the query
        for rank in range(count, 0, -1):
            auth = f"ranked-{rank:04d}"
            await player_factory(
                auth,
                nicknames=[f"Player{rank}"],
                rank=rank,
                points=10_000 - rank,
                games_played=10,
                commit=False,
            )
            auths.append(auth)
        await db_session.commit()
        return auths

    return _seed


@pytest.fixture
def room_factory(db_session):
    async def _create_room(**fields) -> RoomLink:
        defaults = {
            "id": 1,
            "room_link": "https://example.com/play?c=abc123",
            "total_players": 8,
            "red_players": 3,
            "blue_players": 3,
            "spec_players": 2,
            "blue_score": 1,
            "red_score": 2,
        }
        defaults.update(fields)
        room = RoomLink(**defaults)
        db_session.add(room)
        await db_session.commit()
        return room

    return _create_room
