"""Room link reads."""
import logging

from pitchside.services.store_gateway import NotFoundError, StoreGateway
from pitchside.utils.cache import CacheStore, CacheTag

logger = logging.getLogger(__name__)


class RoomService:
    """Read path for the singleton room link record."""

    def __init__(self, gateway: StoreGateway, cache: CacheStore):
        self.gateway = gateway
        self.cache = cache

    async def get_room_link(self) -> dict:
        cached = self.cache.get(CacheTag.ROOM_LINK)
        if cached is not None:
            return cached

        room = await self.gateway.fetch_room_link()
        if room is None:
            raise NotFoundError("Could not fetch room link")

        try:
            self.cache.set(CacheTag.ROOM_LINK, room)
        except Exception as exc:
            logger.warning(f"Room link cache backfill failed: {exc}")
        return room
