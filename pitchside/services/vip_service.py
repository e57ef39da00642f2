"""VIP status reads and VIP appearance writes."""
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from pitchside.services.store_gateway import NotFoundError, StoreGateway, VipRecord
from pitchside.utils.cache import CacheStore, CacheTag

logger = logging.getLogger(__name__)


def not_vip_status() -> dict:
    """Status returned when no identity is supplied."""
    return {
        "isVip": False,
        "isVIP": False,
        "vipColor": None,
        "vipMessage": None,
        "vipCelebration": None,
    }


def vip_status_payload(record: VipRecord, now: datetime | None = None) -> dict:
    """Render a raw record, deriving the effective flag at call time."""
    active = record.is_active(now)
    return {
        "isVip": active,
        "isVIP": active,
        "vipColor": record.color,
        "vipMessage": record.message,
        "vipCelebration": record.celebration,
    }


class VipService:
    """Read path for VIP status plus the write paths that patch it.

    Writes hit the store first. Only when the store accepts the write is the
    cached record for that identity patched, and the patch leaves the cache
    entry's expiry untouched.
    """

    def __init__(
        self,
        gateway: StoreGateway,
        cache: CacheStore,
        *,
        duration_days: int = 30,
        default_color: str = "#ffffff",
    ):
        self.gateway = gateway
        self.cache = cache
        self.duration_days = duration_days
        self.default_color = default_color

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_status(self, auth: str | None) -> dict:
        if not auth:
            return not_vip_status()

        record = self.cache.get_item(CacheTag.VIP_STATUS, auth)
        if record is None:
            record = await self.gateway.fetch_vip_record(auth)
            if record is None:
                raise NotFoundError("Failed to fetch VIP status")
            self.seed(auth, record)

        return vip_status_payload(record)

    def seed(self, auth: str, record: VipRecord) -> None:
        """Store or overwrite the cached record for one identity (best effort)."""
        try:
            self.cache.put_item(CacheTag.VIP_STATUS, auth, record)
        except Exception as exc:
            logger.warning(f"VIP cache update failed for {auth=}: {exc}")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def update_message(self, auth: str, message: str | None) -> None:
        await self._write_field(auth, "vip_message", "message", message)

    async def update_celebration(self, auth: str, celebration: str | None) -> None:
        await self._write_field(auth, "vip_celebration", "celebration", celebration)

    async def update_color(self, auth: str, color: str | None) -> None:
        await self._write_field(auth, "vip_color", "color", color)

    async def grant_purchase(self, auth: str, now: datetime | None = None) -> VipRecord:
        """Grant or renew VIP for ``duration_days`` from now with default appearance."""
        now = now or datetime.now(UTC)
        record = VipRecord(
            flag=True,
            expires_at=now + timedelta(days=self.duration_days),
            color=self.default_color,
            message="",
            celebration=None,
        )
        updated = await self.gateway.update_vip_fields(auth, {
            "is_vip": record.flag,
            "vip_expires_at": record.expires_at,
            "vip_color": record.color,
            "vip_message": record.message,
            "vip_celebration": record.celebration,
        })
        if not updated:
            raise NotFoundError("Failed to update VIP status")

        self.seed(auth, record)
        logger.info(f"VIP granted for {auth=} until {record.expires_at.isoformat()}")
        return record

    async def _write_field(self, auth: str, column: str, attribute: str, value) -> None:
        updated = await self.gateway.update_vip_fields(auth, {column: value})
        if not updated:
            raise NotFoundError(f"No player found to update {attribute}")

        # Absent entries are left for the next refresh or read miss.
        record = self.cache.get_item(CacheTag.VIP_STATUS, auth)
        if record is not None:
            setattr(record, attribute, value)
            logger.debug(f"Patched cached VIP {attribute} for {auth=}")
