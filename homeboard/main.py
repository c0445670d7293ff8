"""
Homeboard - FastAPI Main Application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from homeboard.api.v1.router import api_router
from homeboard.core.config import settings
from homeboard.core.exceptions import (
    AuthorizationError,
    HomeboardError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from homeboard.db.database import async_session_maker
from homeboard.services.user_service import UserService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Domain errors that escape an endpoint
ERROR_STATUS = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")

    # Make sure the household exists on a fresh database
    if settings.seed_default_users:
        try:
            async with async_session_maker() as db:
                await UserService.seed_default_users(db)
                await db.commit()
        except Exception as e:
            logger.warning("Startup seed of household users failed (non-fatal): %s", e)

    yield

    logger.info(f"Shutting down {settings.app_name}")


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    # Details stay in the log; callers only learn that the server failed
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


async def domain_error_handler(request: Request, exc: HomeboardError) -> JSONResponse:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return JSONResponse(status_code=status_code, content={"detail": exc.message})
    logger.error("Unhandled domain error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.app_name,
        description="Household availability board and notices API",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list or ["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(HomeboardError, domain_error_handler)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy", "app": settings.app_name, "env": settings.app_env}

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("homeboard.main:app", host=settings.host, port=settings.port, reload=settings.debug)
