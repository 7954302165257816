from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.deps import get_current_user, get_viewer_id
from dealbies.models.user import User
from dealbies.schemas.comments import CommentOut
from dealbies.schemas.coupons import CouponCreate, CouponOut, CouponSort
from dealbies.services.comments import list_comments
from dealbies.services.coupons import CouponError, CouponNotFound, create_coupon, get_coupon, list_coupons
from dealbies.services.slugs import SlugError

router = APIRouter(prefix="/api/coupons", tags=["Coupons"])


@router.get("", response_model=list[CouponOut])
async def get_coupons(
    merchant: str | None = Query(default=None),
    category: str | None = Query(default=None),
    sort: CouponSort = Query(default="newest"),
    db: AsyncSession = Depends(get_db),
    viewer_id: str | None = Depends(get_viewer_id),
):
    return await list_coupons(
        db,
        merchant=merchant,
        category=category,
        sort=sort,
        viewer_id=viewer_id,
    )


@router.post("", response_model=CouponOut, status_code=201)
async def submit_coupon(
    payload: CouponCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return await create_coupon(db, user=current_user, data=payload)
    except (CouponError, SlugError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{coupon_id}", response_model=CouponOut)
async def get_coupon_by_id(
    coupon_id: str,
    db: AsyncSession = Depends(get_db),
    viewer_id: str | None = Depends(get_viewer_id),
):
    try:
        return await get_coupon(db, coupon_id, viewer_id)
    except CouponNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{coupon_id}/comments", response_model=list[CommentOut])
async def get_coupon_comments(
    coupon_id: str,
    db: AsyncSession = Depends(get_db),
    viewer_id: str | None = Depends(get_viewer_id),
):
    return await list_comments(db, coupon_id=coupon_id, viewer_id=viewer_id)
