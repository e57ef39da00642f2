"""Player profile and rankings endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pitchside.dependencies import get_optional_bearer_token, get_profile_service, get_rankings_service
from pitchside.schemas.player import ProfileResponse, RankingsResponse
from pitchside.services import NotFoundError, ProfileService, RankingsService, StoreError
from pitchside.services.rankings_service import parse_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/getPlayerProfile", response_model=ProfileResponse)
async def get_player_profile(
    auth: str = Query(..., min_length=1),
    user_auth: Optional[str] = Query(default=None, alias="userAuth"),
    token: Optional[str] = Depends(get_optional_bearer_token),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Statistics profile of ``auth``; the requester comes from ``userAuth`` or the bearer token."""
    requester = user_auth or token
    try:
        profile = await profile_service.get_profile(auth, requester)
    except NotFoundError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StoreError as exc:
        logger.error(f"Error fetching player profile: {exc}")
        raise HTTPException(status_code=500, detail="Server error") from exc
    return {"profile": profile}


@router.get("/getRankings", response_model=RankingsResponse)
async def get_rankings(
    page: Optional[str] = Query(default=None),
    auth: Optional[str] = Query(default=None),
    rankings_service: RankingsService = Depends(get_rankings_service),
):
    """One leaderboard page plus the requester's own rank."""
    try:
        return await rankings_service.get_rankings(parse_page(page), auth or None)
    except StoreError as exc:
        logger.error(f"Error in getRankings: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch rankings") from exc
