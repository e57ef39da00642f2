"""Health check endpoint."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pitchside.dependencies import get_cache, get_gateway
from pitchside.services import StoreError, StoreGateway
from pitchside.utils.cache import CacheStore
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(
    gateway: StoreGateway = Depends(get_gateway),
    cache: CacheStore = Depends(get_cache),
):
    """Health check endpoint for monitoring."""
    try:
        await gateway.ping()
    except StoreError as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(status_code=503, content={"error": "Database connection failed"})

    return {
        "status": "ok",
        "database": "connected",
        "cache": cache.stats(),
    }
