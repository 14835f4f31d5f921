import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from listings.core.config import Settings, settings as env_settings
from listings.core.database import Database
from listings.core.errors import ListingError
from listings.core.rate_limit import rate_limit_dependency
from listings.routers import health, properties
from listings.services.file_store import UPLOADS_URL_PREFIX, FileStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


# ─── Security headers middleware ───────────────────────────────────────────────
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if self.environment != "development":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


# ─── Error bodies: always {"message": ...} ────────────────────────────────────
def _validation_message(exc: ValidationError | RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts) or "Invalid input"


async def _listing_error_handler(request: Request, exc: ListingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


async def _validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"message": _validation_message(exc)}, status_code=400)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"message": str(exc.detail)}, status_code=exc.status_code, headers=getattr(exc, "headers", None)
    )


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse({"message": f"Rate limit exceeded: {exc.detail}"}, status_code=429)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Internal server error"}, status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or env_settings
    configure_logging(settings.api_log_level)
    database = Database(settings.database_url)
    file_store = FileStore(settings.upload_dir)
    # StaticFiles refuses to mount a missing directory
    file_store.ensure_directory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            if settings.auto_create_tables:
                await database.create_tables()
            await database.ping()
            logger.info("Connected to database")
        except Exception as exc:
            # Keep serving; requests report the failure individually
            logger.error("Database connection error: %s", exc)
        yield
        await database.dispose()

    app = FastAPI(
        title="Property Listings API",
        version="1.0.0",
        docs_url="/docs" if settings.environment == "development" else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.file_store = file_store

    # Rate limiter: in-process by default, any `limits` storage URI works
    limiter = Limiter(key_func=get_remote_address, storage_uri=settings.rate_limit_storage_uri)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    rate_limited = [Depends(rate_limit_dependency(limiter, settings.rate_limit))]
    app.add_middleware(SecurityHeadersMiddleware, environment=settings.environment)

    # ─── CORS ──────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )

    app.add_exception_handler(ListingError, _listing_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # ─── Routers ──────────────────────────────────
    app.include_router(health.router, dependencies=rate_limited)
    app.include_router(properties.router, prefix="/api", dependencies=rate_limited)
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=file_store.directory), name="uploads")

    return app


def serve() -> None:
    """Console entry point; `uvicorn listings.main:create_app --factory` is equivalent."""
    app = create_app(env_settings)
    logger.info("Server running on port %d", env_settings.port)
    uvicorn.run(app, host=env_settings.api_host, port=env_settings.port)


if __name__ == "__main__":
    serve()
