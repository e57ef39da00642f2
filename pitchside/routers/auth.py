"""Authentication endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from pitchside.dependencies import get_auth_service, get_bearer_token
from pitchside.schemas.auth import LoginRequest, LoginResponse
from pitchside.services import AuthError, AuthService, NotFoundError, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Authenticate a player via nickname/password."""
    try:
        return await auth_service.login(request.username, request.password)
    except (AuthError, NotFoundError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StoreError as exc:
        logger.error(f"Login error: {exc}")
        raise HTTPException(status_code=500, detail="An error occurred during login") from exc


@router.post("/login/verify", response_model=LoginResponse)
async def verify_login(
    token: str | None = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Re-validate a previously issued identity token."""
    try:
        return await auth_service.verify(token)
    except AuthError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except StoreError as exc:
        logger.error(f"Login verification error: {exc}")
        raise HTTPException(status_code=500, detail="An error occurred during verification") from exc
