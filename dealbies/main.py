from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# IMPORTANT:
# This imports ALL models so SQLAlchemy registers tables + FKs correctly
import dealbies.models  # noqa: F401
from dealbies.core.config import settings
from dealbies.core.db import Database
from dealbies.core.logger import setup_logging

# Routers
from dealbies.routers.visit import router as visit_router
from dealbies.routers.deals import router as deals_router
from dealbies.routers.coupons import router as coupons_router
from dealbies.routers.comments import router as comments_router
from dealbies.routers.votes import router as votes_router
from dealbies.routers.analytics import router as analytics_router
from dealbies.routers.admin_content import router as admin_content_router
from dealbies.routers.catalogue import router as catalogue_router


def create_app(database: Database | None = None) -> FastAPI:
    """Build the API. Pass ``database`` to reuse an existing engine (tests)."""
    logger = setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_db = getattr(app.state, "db", None) is None
        if owns_db:
            app.state.db = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, pool_pre_ping=True)
            logger.info("Database engine created")
        try:
            yield
        finally:
            if owns_db:
                await app.state.db.dispose()
                app.state.db = None
                logger.info("Database engine disposed")

    app = FastAPI(title="Dealbies API", lifespan=lifespan)
    app.state.db = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Redirector
    app.include_router(visit_router)

    # Offers
    app.include_router(deals_router)
    app.include_router(coupons_router)

    # Community
    app.include_router(comments_router)
    app.include_router(votes_router)

    # Analytics & admin
    app.include_router(analytics_router)
    app.include_router(admin_content_router)

    app.include_router(catalogue_router)

    return app


app = create_app()
