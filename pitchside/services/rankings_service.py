"""Leaderboard pages served through the rankings cache."""
from __future__ import annotations

import logging
import math
import re
import time
from typing import Any

from pitchside.services.store_gateway import StoreGateway
from pitchside.utils.cache import CacheStore, CacheTag

logger = logging.getLogger(__name__)

UNRANKED = "Unranked"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_page(raw: str | None) -> int:
    """Lenient page parsing: leading digits win, anything unparseable or zero is page 1.

    >>> parse_page("2.5"), parse_page("abc"), parse_page(None)
    (2, 1, 1)
    """
    match = _LEADING_INT.match(raw or "")
    if not match:
        return 1
    return int(match.group(1)) or 1


def build_pagination(page: int, per_page: int, total_items: int) -> dict[str, int]:
    return {
        "currentPage": page,
        "perPage": per_page,
        "totalItems": total_items,
        "totalPages": math.ceil(total_items / per_page) if total_items else 0,
    }


async def build_page_snapshot(
    gateway: StoreGateway,
    page: int,
    per_page: int,
    total_items: int,
) -> dict[str, Any]:
    """Fetch one page of rows plus the nicknames of everyone on it.

    The snapshot is only consistent with the ``total_items`` it was captured
    alongside. ``captured_at`` bounds how long the snapshot may be served,
    independently of the lifetime of the rankings entry holding it.
    """
    rows = await gateway.fetch_rankings_page(page, per_page)
    user_data = await gateway.fetch_nicknames(row["auth"] for row in rows)
    return {
        "statsData": rows,
        "userData": user_data,
        "pagination": build_pagination(page, per_page, total_items),
        "captured_at": time.time(),
    }


class RankingsService:
    """Read path for the paginated leaderboard."""

    def __init__(self, gateway: StoreGateway, cache: CacheStore, page_size: int = 250):
        self.gateway = gateway
        self.cache = cache
        self.page_size = page_size

    async def get_rankings(self, page: int, requester_auth: str | None = None) -> dict[str, Any]:
        """Return one leaderboard page, merged with the requester's live rank.

        Pages come from the cache when present; a miss fetches the page from
        the store and backfills it. The requester's own row is never cached.
        """
        page = max(1, page)

        snapshot = self.cache.get_item(CacheTag.RANKINGS, page)
        if snapshot is not None and not self.cache.is_fresh(snapshot.get("captured_at")):
            logger.debug(f"Rankings snapshot for {page=} is older than the cache TTL")
            snapshot = None
        if snapshot is None:
            logger.debug(f"Rankings cache miss for {page=}")
            total_items = await self.gateway.count_player_stats()
            snapshot = await build_page_snapshot(self.gateway, page, self.page_size, total_items)
            if page <= snapshot["pagination"]["totalPages"]:
                self._backfill(page, snapshot)

        user_stats: dict[str, dict] = {}
        count_rank: int | str = UNRANKED
        if requester_auth:
            try:
                row = await self.gateway.fetch_player_stat_row(requester_auth)
            except Exception as exc:
                logger.error(f"Error fetching requester stats for rankings: {exc}")
                row = None
            if row is not None:
                user_stats[requester_auth] = row
                if row.get("rank") is not None:
                    count_rank = row["rank"]

        return {
            "statsData": snapshot["statsData"],
            "userData": snapshot["userData"],
            "userStats": user_stats,
            "countRank": count_rank,
            "pagination": snapshot["pagination"],
        }

    def _backfill(self, page: int, snapshot: dict[str, Any]) -> None:
        try:
            self.cache.put_item(CacheTag.RANKINGS, page, snapshot)
        except Exception as exc:
            logger.warning(f"Rankings cache backfill failed for {page=}: {exc}")
