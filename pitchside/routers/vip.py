"""VIP status and appearance endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from pitchside.dependencies import get_vip_service
from pitchside.schemas.base import SuccessResponse
from pitchside.schemas.vip import (
    UpdateVipCelebrationRequest,
    UpdateVipColorRequest,
    UpdateVipMessageRequest,
    VipPurchaseRequest,
    VipStatusRequest,
    VipStatusResponse,
)
from pitchside.services import NotFoundError, StoreError, VipService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/updateVipMessage", response_model=SuccessResponse)
async def update_vip_message(
    request: UpdateVipMessageRequest,
    vip_service: VipService = Depends(get_vip_service),
) -> SuccessResponse:
    try:
        await vip_service.update_message(request.auth, request.vip_message)
    except NotFoundError as exc:
        raise HTTPException(status_code=400, detail="Failed to update VIP message") from exc
    except StoreError as exc:
        logger.error(f"Error updating VIP message: {exc}")
        raise HTTPException(status_code=500, detail="Failed to update VIP message") from exc
    return SuccessResponse()


@router.post("/updateVipCelebration", response_model=SuccessResponse)
async def update_vip_celebration(
    request: UpdateVipCelebrationRequest,
    vip_service: VipService = Depends(get_vip_service),
) -> SuccessResponse:
    try:
        await vip_service.update_celebration(request.auth, request.vip_celebration)
    except NotFoundError as exc:
        raise HTTPException(status_code=400, detail="Failed to update VIP celebration") from exc
    except StoreError as exc:
        logger.error(f"Error updating VIP celebration: {exc}")
        raise HTTPException(status_code=500, detail="Failed to update VIP celebration") from exc
    return SuccessResponse()


@router.post("/update-vip-color", response_model=SuccessResponse)
async def update_vip_color(
    request: UpdateVipColorRequest,
    vip_service: VipService = Depends(get_vip_service),
) -> SuccessResponse:
    try:
        await vip_service.update_color(request.auth, request.color)
    except NotFoundError as exc:
        raise HTTPException(status_code=400, detail="Failed to update VIP color") from exc
    except StoreError as exc:
        logger.error(f"Error updating vip_color: {exc}")
        raise HTTPException(status_code=500, detail="Failed to update VIP color") from exc
    return SuccessResponse()


@router.post("/bmc-purchase", response_model=SuccessResponse)
async def bmc_purchase(
    request: VipPurchaseRequest,
    vip_service: VipService = Depends(get_vip_service),
) -> SuccessResponse:
    """Grant or renew VIP after a confirmed purchase."""
    try:
        await vip_service.grant_purchase(request.auth)
    except NotFoundError as exc:
        raise HTTPException(status_code=400, detail="Failed to update VIP status") from exc
    except StoreError as exc:
        logger.error(f"BMC purchase update error: {exc}")
        raise HTTPException(status_code=500, detail="Failed to update VIP status") from exc
    return SuccessResponse()


@router.post("/vip-status", response_model=VipStatusResponse)
async def vip_status(
    request: Optional[VipStatusRequest] = None,
    vip_service: VipService = Depends(get_vip_service),
):
    """Effective VIP state for one identity."""
    auth = request.auth if request else None
    try:
        return await vip_service.get_status(auth)
    except NotFoundError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StoreError as exc:
        logger.error(f"Error in vip-status: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch VIP status") from exc
