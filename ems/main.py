"""
Employee Management System — application entry point.

This is the **only** file that assembles the app.  Business logic lives in
`domain/`, persistence in `models/`, `db/` and `repositories/`, and the HTTP
surface in `api/`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ems.api.v1.api import api_router
from ems.core.config import settings
from ems.core.exceptions import register_exception_handlers
from ems.db.base import Base
from ems.db.seed import seed_departments
from ems.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from ems.models.contractor import Contractor  # noqa: F401
from ems.models.department import Department  # noqa: F401
from ems.models.employee import Employee  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    if settings.SEED_DEPARTMENTS:
        async with async_session_factory() as session:
            await seed_departments(session)

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employees, managers, contractors and departments",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Domain errors map to status codes; nothing leaks a stack trace
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()
