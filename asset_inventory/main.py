"""FastAPI application entry point"""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from asset_inventory.infrastructure.config.settings import settings
from asset_inventory.infrastructure.logging_config import configure_logging
from asset_inventory.presentation.api.v1.routers import assets, chat
from asset_inventory.presentation.exception_handlers import setup_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    configure_logging(settings.LOG_LEVEL)
    logger.info("Initializing %s %s", settings.APP_NAME, settings.APP_VERSION)

    from asset_inventory.infrastructure.database.base import get_session_factory, init_db

    await asyncio.to_thread(init_db)
    logger.info("Database initialized")

    if settings.SEED_DEMO_DATA:
        from asset_inventory.infrastructure.init_data import init_demo_assets
        from asset_inventory.infrastructure.repositories.asset_repository_db import AssetRepositoryDB

        db = get_session_factory()()
        try:
            await init_demo_assets(AssetRepositoryDB(db))
        finally:
            db.close()

    try:
        yield
    except (KeyboardInterrupt, asyncio.CancelledError):
        # Normal shutdown - don't log as error
        pass
    finally:
        logger.info("Shutting down application")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,  # Must be False when using ["*"]
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

setup_exception_handlers(app)

# Include routers under the versioned prefix, and at the root for existing clients
app.include_router(assets.router, prefix=settings.API_V1_PREFIX)
app.include_router(chat.router, prefix=settings.API_V1_PREFIX)
app.include_router(assets.router, include_in_schema=False)
app.include_router(chat.router, include_in_schema=False)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}
