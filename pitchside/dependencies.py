"""FastAPI dependencies."""
import logging

from fastapi import Depends, Header, HTTPException, Request

from pitchside.config import get_settings
from pitchside.services import (
    AuthService,
    ProfileService,
    RankingsService,
    RoomService,
    StoreGateway,
    VipService,
)
from pitchside.utils.cache import CacheStore

logger = logging.getLogger(__name__)


def get_cache(request: Request) -> CacheStore:
    """Cache store built by the application lifespan."""
    return request.app.state.cache


def get_gateway(request: Request) -> StoreGateway:
    """Store gateway built by the application lifespan."""
    return request.app.state.gateway


def get_bearer_token(
        authorization: str | None = Header(default=None, alias="Authorization"),
) -> str | None:
    """Return the bearer token, or None when no Authorization header is sent."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="invalid_authorization_header")
    return token.strip()


def get_optional_bearer_token(
        authorization: str | None = Header(default=None, alias="Authorization"),
) -> str | None:
    """Bearer token for public reads; a malformed header is ignored."""
    try:
        return get_bearer_token(authorization)
    except HTTPException:
        logger.debug("Ignoring malformed Authorization header on public read")
        return None


def get_vip_service(
        gateway: StoreGateway = Depends(get_gateway),
        cache: CacheStore = Depends(get_cache),
) -> VipService:
    settings = get_settings()
    return VipService(
        gateway,
        cache,
        duration_days=settings.vip_duration_days,
        default_color=settings.vip_default_color,
    )


def get_auth_service(
        gateway: StoreGateway = Depends(get_gateway),
        vip_service: VipService = Depends(get_vip_service),
) -> AuthService:
    return AuthService(gateway, vip_service)


def get_rankings_service(
        gateway: StoreGateway = Depends(get_gateway),
        cache: CacheStore = Depends(get_cache),
) -> RankingsService:
    return RankingsService(gateway, cache, page_size=get_settings().rankings_page_size)


def get_profile_service(
        gateway: StoreGateway = Depends(get_gateway),
        cache: CacheStore = Depends(get_cache),
) -> ProfileService:
    return ProfileService(gateway, cache)


def get_room_service(
        gateway: StoreGateway = Depends(get_gateway),
        cache: CacheStore = Depends(get_cache),
) -> RoomService:
    return RoomService(gateway, cache)
