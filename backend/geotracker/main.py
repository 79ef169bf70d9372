"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geotracker.api.routes import collections, prompts, providers, runs, settings as settings_routes
from geotracker.config import get_settings
from geotracker.database import AsyncSessionLocal, Base, engine
from geotracker.logging_config import configure_logging
from geotracker.repositories import PromptRepository, SettingsRepository

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Create missing tables and seed an empty database."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        await SettingsRepository(session).get()
        seeded = await PromptRepository(session).seed_defaults()
        await session.commit()

    if seeded:
        logger.info(f"Seeded {seeded} starter prompts")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging(settings)
    await init_db()
    yield
    # Shutdown
    await engine.dispose()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Track how AI assistants mention and cite a website",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(prompts.router, prefix="/api/prompts", tags=["prompts"])
app.include_router(collections.router, prefix="/api/collections", tags=["collections"])
app.include_router(runs.router, prefix="/api/runs", tags=["runs"])
app.include_router(settings_routes.router, prefix="/api/settings", tags=["settings"])
app.include_router(providers.router, prefix="/api/providers", tags=["providers"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
    }
