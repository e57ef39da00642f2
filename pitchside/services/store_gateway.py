"""Typed queries against the remote relational store."""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import AsyncIterator, Iterable

from sqlalchemy import String, cast, func, select, text, update
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pitchside.models.player_stats import PlayerStats
from pitchside.models.room_link import ROOM_LINK_ID, RoomLink
from pitchside.models.user import User
from pitchside.utils.datetime_helpers import ensure_utc

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a query against the remote store fails."""


class NotFoundError(RuntimeError):
    """Raised when a requested record does not exist in the store."""


@dataclass
class VipRecord:
    """Raw VIP fields as stored; the effective flag is derived on demand."""

    flag: bool
    expires_at: datetime | None
    color: str | None
    message: str | None
    celebration: str | None

    def is_active(self, now: datetime | None = None) -> bool:
        if not self.flag or self.expires_at is None:
            return False
        now = now or datetime.now(UTC)
        return ensure_utc(self.expires_at) > now

    @classmethod
    def from_user(cls, user: User) -> "VipRecord":
        return cls(
            flag=bool(user.is_vip),
            expires_at=ensure_utc(user.vip_expires_at),
            color=user.vip_color,
            message=user.vip_message,
            celebration=user.vip_celebration,
        )


@dataclass
class CredentialRecord:
    """Identity row used to authenticate a player."""

    auth: str
    password: str
    nicknames: list[str] = field(default_factory=list)
    vip: VipRecord | None = None

    @classmethod
    def from_user(cls, user: User) -> "CredentialRecord":
        return cls(
            auth=user.auth,
            password=user.password,
            nicknames=list(user.nicknames or []),
            vip=VipRecord.from_user(user),
        )


class StoreGateway:
    """Narrow query interface used by the cache layer and the services.

    Each call opens its own short-lived session so the gateway can be shared
    by request handlers and background refresh runs alike.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.dialect = engine.dialect.name
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error(f"Store query failed during {operation}: {exc}")
                raise StoreError(f"{operation} failed") from exc

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------
    async def count_player_stats(self) -> int:
        async with self._session("count_player_stats") as session:
            result = await session.execute(select(func.count()).select_from(PlayerStats))
            return int(result.scalar_one())

    async def fetch_rankings_page(self, page: int, per_page: int) -> list[dict]:
        """Rows for one 1-based page ordered by ascending rank."""
        offset = (page - 1) * per_page
        stmt = (
            select(PlayerStats)
            .order_by(PlayerStats.rank.asc().nulls_last(), PlayerStats.auth.asc())
            .offset(offset)
            .limit(per_page)
        )
        async with self._session("fetch_rankings_page") as session:
            result = await session.execute(stmt)
            return [row.to_ranking_row() for row in result.scalars().all()]

    async def fetch_nicknames(self, auths: Iterable[str]) -> dict[str, dict]:
        """Map each identity to ``{auth, nicknames}``."""
        auth_ids = list(dict.fromkeys(auths))
        if not auth_ids:
            return {}
        stmt = select(User.auth, User.nicknames).where(User.auth.in_(auth_ids))
        async with self._session("fetch_nicknames") as session:
            result = await session.execute(stmt)
            return {
                auth: {"auth": auth, "nicknames": list(nicknames or [])}
                for auth, nicknames in result.all()
            }

    async def fetch_player_stat_row(self, auth: str) -> dict | None:
        """Single ranking row (including rank) for one identity."""
        async with self._session("fetch_player_stat_row") as session:
            stats = await session.get(PlayerStats, auth)
            return stats.to_ranking_row() if stats else None

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------
    async def fetch_profile(self, auth: str) -> dict | None:
        async with self._session("fetch_profile") as session:
            stats = await session.get(PlayerStats, auth)
            return stats.to_profile() if stats else None

    async def fetch_all_profiles(self) -> dict[str, dict]:
        async with self._session("fetch_all_profiles") as session:
            result = await session.execute(select(PlayerStats))
            return {stats.auth: stats.to_profile() for stats in result.scalars().all()}

    # ------------------------------------------------------------------
    # Room link
    # ------------------------------------------------------------------
    async def fetch_room_link(self) -> dict | None:
        async with self._session("fetch_room_link") as session:
            room = await session.get(RoomLink, ROOM_LINK_ID)
            return room.to_dict() if room else None

    # ------------------------------------------------------------------
    # VIP status
    # ------------------------------------------------------------------
    async def fetch_vip_record(self, auth: str) -> VipRecord | None:
        async with self._session("fetch_vip_record") as session:
            user = await session.get(User, auth)
            return VipRecord.from_user(user) if user else None

    async def fetch_all_vip_records(self) -> dict[str, VipRecord]:
        async with self._session("fetch_all_vip_records") as session:
            result = await session.execute(select(User))
            return {user.auth: VipRecord.from_user(user) for user in result.scalars().all()}

    async def update_vip_fields(self, auth: str, values: dict) -> bool:
        """Write VIP columns for one identity; False when no row matched.

        ``values`` is keyed by ``User`` attribute name.
        """
        column_values = {getattr(User, name): value for name, value in values.items()}
        stmt = update(User).where(User.auth == auth).values(column_values)
        async with self._session("update_vip_fields") as session:
            result = await session.execute(stmt)
            await session.commit()
            return (result.rowcount or 0) > 0

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------
    async def find_credentials_by_nickname(self, username: str) -> list[CredentialRecord]:
        """Identities whose nickname set contains ``username`` exactly."""
        if self.dialect == "postgresql":
            condition = cast(User.nicknames, JSONB).contains([username])
        else:
            # JSON arrays are stored as text; narrow with a substring match and
            # apply exact membership below.
            condition = cast(User.nicknames, String).contains(json.dumps(username), autoescape=True)

        async with self._session("find_credentials_by_nickname") as session:
            result = await session.execute(select(User).where(condition))
            users = result.scalars().all()

        return [
            CredentialRecord.from_user(user)
            for user in users
            if username in (user.nicknames or [])
        ]

    async def fetch_credentials(self, auth: str) -> CredentialRecord | None:
        async with self._session("fetch_credentials") as session:
            user = await session.get(User, auth)
            return CredentialRecord.from_user(user) if user else None

    async def ping(self) -> None:
        async with self._session("ping") as session:
            await session.execute(text("SELECT 1"))
