"""FastAPI application entry point."""
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pitchside.config import get_settings
from pitchside.database import create_engine_from_settings
from pitchside.routers import auth, health, player, room, vip
from pitchside.services import CacheRefresher, StoreError, StoreGateway
from pitchside.utils.cache import CacheStore
from pitchside.version import APP_VERSION

settings = get_settings()

# Create logs directory if it doesn't exist
logs_dir = Path(settings.log_dir)
logs_dir.mkdir(parents=True, exist_ok=True)

log_file = logs_dir / "pitchside.log"
api_log_file = logs_dir / "pitchside_api.log"

# Rotating handler for general logs (1MB max size, keep 5 backup files)
rotating_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=5, encoding='utf-8')
rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

# Rotating handler for API request logs (2MB max size, keep 15 backup files)
api_rotating_handler = RotatingFileHandler(api_log_file, maxBytes=2 * 1024 * 1024, backupCount=15, encoding='utf-8')
api_rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))

# Force=True overrides any existing configuration (e.g., from uvicorn)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        rotating_handler,
    ],
    force=True,
)

logger = logging.getLogger(__name__)

# Dedicated API request logger
api_logger = logging.getLogger("pitchside.api")
api_logger.handlers.clear()
api_logger.addHandler(api_rotating_handler)
api_logger.setLevel(logging.INFO)
api_logger.propagate = False

uvicorn_access_logger = logging.getLogger("uvicorn.access")
if rotating_handler not in uvicorn_access_logger.handlers:
    uvicorn_access_logger.addHandler(rotating_handler)


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """Build the cache layer, start the refresh loop and tear both down on exit."""
    logger.info("=" * 60)
    logger.info("Pitchside API Starting")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Database: {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'SQLite'}")
    logger.info(f"Cache TTL: {settings.cache_ttl_seconds}s, refresh every {settings.cache_refresh_interval_seconds}s")
    logger.info("=" * 60)

    engine = create_engine_from_settings()
    cache = CacheStore(ttl=settings.cache_ttl_seconds)
    gateway = StoreGateway(engine)
    refresher = CacheRefresher(
        gateway,
        cache,
        page_size=settings.rankings_page_size,
        interval_seconds=settings.cache_refresh_interval_seconds,
    )

    app_instance.state.cache = cache
    app_instance.state.gateway = gateway
    app_instance.state.refresher = refresher

    refresh_task = None
    if settings.cache_refresh_enabled:
        try:
            refresh_task = asyncio.create_task(refresher.run_forever())
            logger.info("Cache refresh task started")
        except Exception as e:
            logger.error(f"Failed to start cache refresh task: {e}")
    else:
        logger.info("Cache refresh is disabled, caches fill on read only")

    try:
        yield
    finally:
        logger.info("Shutting down background tasks...")
        if refresh_task:
            refresh_task.cancel()
            try:
                await asyncio.wait_for(refresh_task, timeout=2.0)
            except asyncio.CancelledError:
                logger.info("Cache refresh task cancelled")
            except asyncio.TimeoutError:
                logger.warning("Cache refresh task did not cancel within timeout, forcing shutdown")
            except Exception as e:
                logger.error(f"Error cancelling cache refresh task: {e}")

        await refresher.stop()
        cache.clear()
        await engine.dispose()
        logger.info("Pitchside API Shutting Down... Goodbye!")


app = FastAPI(
    title="Pitchside API",
    description="Companion-site backend: login, player stats, rankings, VIP and room state",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as ``{"error": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed payloads with a 400 and the first offending field."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    errors = exc.errors()
    message = "Invalid request"
    if errors:
        loc = errors[0].get("loc", [])
        field_path = " -> ".join(str(x) for x in loc[1:]) if len(loc) > 1 else "request"
        message = f"Invalid request: {field_path}: {errors[0].get('msg', 'validation error')}"

    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Unhandled store error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Server error"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Server error"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with status and timing to the API log file."""
    start_time = time.time()

    client_ip = request.client.host if request.client else "unknown"
    method = request.method
    path = request.url.path
    request_id = f"{method}:{path}:{int(start_time * 1000) % 100000}"

    api_logger.info(f">> {request_id} | START | {method} {path} | IP: {client_ip}")
    if request.query_params:
        api_logger.info(f">> {request_id} | QUERY | {request.query_params}")

    try:
        response = await call_next(request)
    except Exception as e:
        api_logger.error(
            f"<< {request_id} | EXCEPTION | {method} {path} | "
            f"Error: {str(e)[:100]} | Time: {time.time() - start_time:.3f}s"
        )
        raise

    api_logger.info(
        f"<< {request_id} | COMPLETE | {method} {path} | "
        f"Status: {response.status_code} | Time: {time.time() - start_time:.3f}s"
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(player.router)
app.include_router(vip.router)
app.include_router(room.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Pitchside API",
        "version": APP_VERSION,
        "environment": settings.environment,
        "docs": "/docs",
    }
