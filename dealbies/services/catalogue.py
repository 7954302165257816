from __future__ import annotations

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.models.coupon import Coupon
from dealbies.models.deal import Deal


async def list_categories(db: AsyncSession) -> dict:
    deal_res = await db.execute(select(Deal.category).distinct().order_by(Deal.category))
    coupon_res = await db.execute(select(Coupon.category).distinct().order_by(Coupon.category))

    deal_categories = [c for c in deal_res.scalars().all() if c]
    coupon_categories = [c for c in coupon_res.scalars().all() if c]

    return {
        "deal_categories": deal_categories,
        "coupon_categories": coupon_categories,
        "all_unique_categories": sorted(set(deal_categories) | set(coupon_categories)),
    }


async def ping(db: AsyncSession) -> None:
    await db.execute(text("SELECT 1"))
