from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.deps import require_admin
from dealbies.schemas.clicks import ClickAnalyticsOut, ClickIn, ClickOut, ClickType
from dealbies.services.clicks import click_analytics, record_click

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.post("/clicks", response_model=ClickOut)
async def track_click(
    payload: ClickIn,
    db: AsyncSession = Depends(get_db),
):
    return await record_click(db, payload)


@router.get("/clicks", response_model=ClickAnalyticsOut)
async def get_click_analytics(
    merchant: str | None = Query(default=None),
    type: ClickType | None = Query(default=None),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_admin),
):
    """
    Click log page + merchant/type groups + 30-day daily rollup.
    """
    return await click_analytics(
        db,
        merchant=merchant,
        click_type=type,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
