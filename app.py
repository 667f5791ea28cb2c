"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the repository and scheduling service, registers routers, and runs
startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from dept_scheduler.controllers.availability_controller import router as availability_router
from dept_scheduler.controllers.schedule_controller import router as schedule_router
from dept_scheduler.repository.commitment_repository import CommitmentRepository
from dept_scheduler.services.scheduling_service import SchedulingService
from dept_scheduler.utils.config import Settings, get_settings
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Instantiates the repository and service with explicit dependency injection
    via app.state. Every dependency is traceable from this function.
    """
    settings = settings or get_settings()

    # --- Repository (in-memory commitment collection) ---
    repository = CommitmentRepository(settings)

    # --- Services (pure engines behind one orchestrator) ---
    scheduling_service = SchedulingService(
        repository=repository,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Routers ---
    app.include_router(schedule_router)
    app.include_router(availability_router)

    # --- Inject services into app.state for dependency resolution ---
    app.state.repository = repository
    app.state.scheduling_service = scheduling_service

    return app


def _startup(app: FastAPI) -> None:
    """
    Idempotent startup sequence. Safe to re-run on server restarts.

    The demo department is seeded only into an empty repository, then the
    commitment index is built once so the first request does not pay for it.
    """
    repository: CommitmentRepository = app.state.repository
    scheduling_service: SchedulingService = app.state.scheduling_service

    logger.info("Startup: seeding demo commitments (skipped if repository not empty)")
    repository.seed_demo_data()

    logger.info("Startup: building commitment index")
    index = scheduling_service.get_index()

    logger.info(
        "Startup complete | version=%s | entities=%s | rooms=%s",
        repository.version,
        len(index.named_entities),
        len(index.room_catalog),
    )


# Module-level app object for uvicorn
app = create_app()
