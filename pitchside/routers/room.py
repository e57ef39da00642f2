"""Room link endpoint."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from pitchside.dependencies import get_room_service
from pitchside.schemas.room import RoomLinkResponse
from pitchside.services import NotFoundError, RoomService, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/room-link", response_model=RoomLinkResponse)
async def get_room_link(room_service: RoomService = Depends(get_room_service)):
    try:
        return await room_service.get_room_link()
    except NotFoundError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StoreError as exc:
        logger.error(f"Room link fetch error: {exc}")
        raise HTTPException(status_code=500, detail="Server error") from exc
