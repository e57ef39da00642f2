"""Timer-driven population of the resource caches."""
from __future__ import annotations

import asyncio
import logging
import math
from typing import Awaitable, Callable

from pitchside.services.rankings_service import build_page_snapshot
from pitchside.services.store_gateway import StoreGateway
from pitchside.utils.cache import CacheStore, CacheTag

logger = logging.getLogger(__name__)


class CacheRefresher:
    """Pulls full snapshots of the four hot resources into the cache.

    Each resource refreshes independently: a failure in one never stops the
    others. Runs are serialized per tag, so a tick that finds the previous run
    for a tag still in flight skips that tag.
    """

    def __init__(
        self,
        gateway: StoreGateway,
        cache: CacheStore,
        *,
        page_size: int = 250,
        interval_seconds: float = 420.0,
    ):
        self.gateway = gateway
        self.cache = cache
        self.page_size = page_size
        self.interval_seconds = interval_seconds
        self._running: set[CacheTag] = set()
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    async def run_forever(self) -> None:
        """Refresh immediately, then on every interval tick.

        Ticks are fixed-period; a slow run does not delay the next tick.
        """
        logger.info(f"Cache refresh loop starting (every {self.interval_seconds}s)")
        while True:
            self._spawn(self.refresh_all())
            await asyncio.sleep(self.interval_seconds)

    def _spawn(self, coro: Awaitable) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def stop(self) -> None:
        """Cancel refresh runs still in flight."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def refresh_all(self) -> dict[str, bool]:
        results = await asyncio.gather(
            self.refresh_rankings(),
            self.refresh_profiles(),
            self.refresh_room_link(),
            self.refresh_vip_status(),
        )
        return dict(zip([tag.value for tag in CacheTag], results))

    async def _run(self, tag: CacheTag, routine: Callable[[], Awaitable[str]]) -> bool:
        """Run one resource refresh unless one for the same tag is in flight."""
        if tag in self._running:
            logger.info(f"Refresh for {tag.value} already running, skipping")
            return False

        self._running.add(tag)
        try:
            summary = await routine()
            logger.info(f"Refreshed {tag.value} cache: {summary}")
            return True
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Failed to refresh {tag.value} cache: {e}")
            return False
        finally:
            self._running.discard(tag)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    async def refresh_rankings(self) -> bool:
        return await self._run(CacheTag.RANKINGS, self._refresh_rankings)

    async def refresh_profiles(self) -> bool:
        return await self._run(CacheTag.PROFILES, self._refresh_profiles)

    async def refresh_room_link(self) -> bool:
        return await self._run(CacheTag.ROOM_LINK, self._refresh_room_link)

    async def refresh_vip_status(self) -> bool:
        return await self._run(CacheTag.VIP_STATUS, self._refresh_vip_status)

    async def _refresh_rankings(self) -> str:
        total_items = await self.gateway.count_player_stats()
        total_pages = math.ceil(total_items / self.page_size) if total_items else 0

        # Carry the previous pages over so readers keep hitting the cache
        # while each page is replaced in turn. Only pages captured within the
        # last TTL survive, so a page that keeps failing still ages out.
        pages = {
            page: snapshot
            for page, snapshot in (self.cache.get(CacheTag.RANKINGS) or {}).items()
            if self.cache.is_fresh(snapshot.get("captured_at"))
        }
        self.cache.set(CacheTag.RANKINGS, pages)

        refreshed = 0
        for page in range(1, total_pages + 1):
            try:
                pages[page] = await build_page_snapshot(
                    self.gateway, page, self.page_size, total_items
                )
                refreshed += 1
            except Exception as e:
                logger.error(f"Failed to refresh rankings {page=}: {e}")

        stale_pages = [
            page for page, snapshot in pages.items()
            if page > total_pages or not self.cache.is_fresh(snapshot.get("captured_at"))
        ]
        for stale_page in stale_pages:
            pages.pop(stale_page, None)

        return f"{refreshed}/{total_pages} pages, {total_items} players"

    async def _refresh_profiles(self) -> str:
        profiles = await self.gateway.fetch_all_profiles()
        self.cache.set(CacheTag.PROFILES, profiles)
        return f"{len(profiles)} profiles"

    async def _refresh_room_link(self) -> str:
        room = await self.gateway.fetch_room_link()
        if room is None:
            return "no room link row"
        self.cache.set(CacheTag.ROOM_LINK, room)
        return room.get("room_link") or "room link without url"

    async def _refresh_vip_status(self) -> str:
        records = await self.gateway.fetch_all_vip_records()
        self.cache.set(CacheTag.VIP_STATUS, records)
        active = sum(1 for record in records.values() if record.is_active())
        return f"{len(records)} players, {active} active VIP"
