from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.models.click_tracking import ClickTracking
from dealbies.schemas.clicks import ClickIn

DAILY_WINDOW_DAYS = 30


async def record_click(db: AsyncSession, data: ClickIn) -> ClickTracking:
    click = ClickTracking(**data.model_dump())
    db.add(click)
    await db.commit()
    await db.refresh(click)
    return click


def _filters(
    *,
    merchant: str | None,
    click_type: str | None,
    start_date: datetime | None,
    end_date: datetime | None,
) -> list:
    conds = []
    if merchant:
        conds.append(func.lower(ClickTracking.merchant) == merchant.lower())
    if click_type:
        conds.append(ClickTracking.type == click_type)
    if start_date is not None:
        conds.append(ClickTracking.created_at >= start_date)
    if end_date is not None:
        conds.append(ClickTracking.created_at <= end_date)
    return conds


async def click_analytics(
    db: AsyncSession,
    *,
    merchant: str | None = None,
    click_type: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = 100,
    offset: int = 0,
    now: datetime | None = None,
) -> dict:
    conds = _filters(
        merchant=merchant,
        click_type=click_type,
        start_date=start_date,
        end_date=end_date,
    )

    # page
    res = await db.execute(
        select(ClickTracking)
        .where(*conds)
        .order_by(ClickTracking.created_at.desc(), ClickTracking.id.desc())
        .limit(limit)
        .offset(offset)
    )
    clicks = list(res.scalars().all())

    total_res = await db.execute(select(func.count(ClickTracking.id)).where(*conds))
    total = int(total_res.scalar_one() or 0)

    # merchant/type groups
    count_col = func.count(ClickTracking.id)
    stats_res = await db.execute(
        select(ClickTracking.merchant, ClickTracking.type, count_col)
        .where(*conds)
        .group_by(ClickTracking.merchant, ClickTracking.type)
        .order_by(count_col.desc())
    )
    stats = [
        {"merchant": r[0], "type": str(r[1]), "count": int(r[2])}
        for r in stats_res.all()
    ]

    # last 30 days rollup (ignores the filters above)
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=DAILY_WINDOW_DAYS)
    day = func.date(ClickTracking.created_at)
    daily_res = await db.execute(
        select(day, func.count(ClickTracking.id), func.count(distinct(ClickTracking.merchant)))
        .where(ClickTracking.created_at >= since)
        .group_by(day)
        .order_by(day.desc())
    )
    daily_stats = [
        {"date": r[0], "clicks": int(r[1]), "merchants": int(r[2])}
        for r in daily_res.all()
    ]

    return {
        "clicks": clicks,
        "total_count": total,
        "stats": stats,
        "daily_stats": daily_stats,
        "pagination": {
            "limit": limit,
            "offset": offset,
            "total": total,
            "has_more": offset + limit < total,
        },
    }
