"""Player profile reads."""
from __future__ import annotations

import logging

from pitchside.services.store_gateway import NotFoundError, StoreGateway
from pitchside.utils.cache import CacheStore, CacheTag

logger = logging.getLogger(__name__)


class ProfileService:
    """Read path for per-player statistics profiles."""

    def __init__(self, gateway: StoreGateway, cache: CacheStore):
        self.gateway = gateway
        self.cache = cache

    async def get_profile(self, auth: str, requester_auth: str | None = None) -> dict:
        """Return the profile for ``auth``.

        A player viewing their own profile always gets a live read, which also
        refreshes their cached entry.
        """
        if requester_auth and requester_auth == auth:
            return await self._fetch_and_backfill(auth)

        cached = self.cache.get_item(CacheTag.PROFILES, auth)
        if cached is not None:
            return cached

        return await self._fetch_and_backfill(auth)

    async def _fetch_and_backfill(self, auth: str) -> dict:
        profile = await self.gateway.fetch_profile(auth)
        if profile is None:
            raise NotFoundError("Error fetching player profile")

        try:
            self.cache.put_item(CacheTag.PROFILES, auth, profile)
        except Exception as exc:
            logger.warning(f"Profile cache backfill failed for {auth=}: {exc}")
        return profile
