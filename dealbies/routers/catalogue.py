from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.logger import get_logger
from dealbies.schemas.catalogue import CategoriesOut, HealthOut
from dealbies.services.catalogue import list_categories, ping

logger = get_logger("routers.catalogue")

router = APIRouter(prefix="/api", tags=["Catalogue"])


@router.get("/categories", response_model=CategoriesOut)
async def get_categories(db: AsyncSession = Depends(get_db)):
    return await list_categories(db)


@router.get("/health", response_model=HealthOut)
async def health(db: AsyncSession = Depends(get_db)):
    try:
        await ping(db)
    except (SQLAlchemyError, OSError):
        logger.exception("Database connection failed")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Database connection failed"},
        )
    return HealthOut(status="ok", message="Database connection successful")
