from pitchside.services.store_gateway import (
    StoreGateway,
    StoreError,
    NotFoundError,
    VipRecord,
    CredentialRecord,
)
from pitchside.services.rankings_service import RankingsService
from pitchside.services.profile_service import ProfileService
from pitchside.services.room_service import RoomService
from pitchside.services.vip_service import VipService
from pitchside.services.auth_service import AuthService, AuthError
from pitchside.services.cache_refresher import CacheRefresher

__all__ = [
    "StoreGateway",
    "StoreError",
    "NotFoundError",
    "VipRecord",
    "CredentialRecord",
    "RankingsService",
    "ProfileService",
    "RoomService",
    "VipService",
    "AuthService",
    "AuthError",
    "CacheRefresher",
]
