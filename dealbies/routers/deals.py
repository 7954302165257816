from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import HttpUrl
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.deps import get_current_user, get_viewer_id
from dealbies.models.user import User
from dealbies.schemas.comments import CommentOut
from dealbies.schemas.deals import (
    DealCheckOut,
    DealCreate,
    DealCreated,
    DealOut,
    DealSort,
    HottestDealOut,
)
from dealbies.services.comments import list_comments
from dealbies.services.deals import (
    RELATED_LIMIT,
    DealError,
    DealNotFound,
    check_deal_url,
    create_deal,
    get_deal,
    hottest_deals,
    list_deals,
    related_deals,
)
from dealbies.services.slugs import SlugError

router = APIRouter(prefix="/api/deals", tags=["Deals"])


@router.get("", response_model=list[DealOut])
async def get_deals(
    category: str | None = Query(default=None),
    sort: DealSort = Query(default="newest"),
    db: AsyncSession = Depends(get_db),
    viewer_id: str | None = Depends(get_viewer_id),
):
    return await list_deals(db, category=category, sort=sort, viewer_id=viewer_id)


@router.get("/hottest", response_model=list[HottestDealOut])
async def get_hottest_deals(db: AsyncSession = Depends(get_db)):
    return await hottest_deals(db)


@router.get("/check", response_model=DealCheckOut)
async def check_deal(
    url: HttpUrl = Query(...),
    db: AsyncSession = Depends(get_db),
):
    deal = await check_deal_url(db, str(url))
    return DealCheckOut(exists=deal is not None, deal=deal)


@router.post("", response_model=DealCreated, status_code=201)
async def submit_deal(
    payload: DealCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        deal = await create_deal(db, user=current_user, data=payload)
    except (DealError, SlugError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DealCreated(deal_id=deal.id, slug=deal.slug)


@router.get("/{deal_id}", response_model=DealOut)
async def get_deal_by_id(
    deal_id: str,
    db: AsyncSession = Depends(get_db),
    viewer_id: str | None = Depends(get_viewer_id),
):
    try:
        return await get_deal(db, deal_id, viewer_id)
    except DealNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{deal_id}/related", response_model=list[DealOut])
async def get_related_deals(
    deal_id: str,
    limit: int = Query(default=RELATED_LIMIT, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    viewer_id: str | None = Depends(get_viewer_id),
):
    try:
        return await related_deals(db, deal_id, limit=limit, viewer_id=viewer_id)
    except DealNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{deal_id}/comments", response_model=list[CommentOut])
async def get_deal_comments(
    deal_id: str,
    db: AsyncSession = Depends(get_db),
    viewer_id: str | None = Depends(get_viewer_id),
):
    return await list_comments(db, deal_id=deal_id, viewer_id=viewer_id)
