from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealbies.core.logger import get_logger
from dealbies.models.comment import Comment
from dealbies.models.deal import Deal
from dealbies.models.image import Image
from dealbies.models.user import User
from dealbies.schemas.common import PostedBy
from dealbies.schemas.deals import (
    DealCreate,
    DealOut,
    DealSummary,
    DealUpdate,
    HottestDealOut,
)
from dealbies.services.affiliate import link_attributes, merchant_host
from dealbies.services.scoring import compute_score, sort_offers, viewer_vote
from dealbies.services.slugs import unique_slug

logger = get_logger("deals")

HOTTEST_POOL = 50
HOTTEST_LIMIT = 3
RELATED_LIMIT = 3

_REQUIRED_FIELDS = {"title", "description", "price", "category", "deal_url"}


class DealError(Exception):
    pass


class DealNotFound(DealError):
    pass


def _comment_count():
    return (
        select(func.count(Comment.id))
        .where(Comment.deal_id == Deal.id)
        .correlate(Deal)
        .scalar_subquery()
    )


def posted_by(user: User) -> PostedBy:
    return PostedBy(id=user.id, name=user.username, avatar=user.avatar_url)


def image_urls(images) -> list[str]:
    # cover first, then upload order
    ordered = sorted(images, key=lambda img: (not img.is_cover, img.position))
    return [img.public_url for img in ordered]


def _money(v: Decimal | None) -> float | None:
    return float(v) if v is not None else None


def deal_view(deal: Deal, comment_count: int, viewer_id: str | None = None) -> DealOut:
    return DealOut(
        id=deal.id,
        slug=deal.slug,
        title=deal.title,
        description=deal.description,
        image_urls=image_urls(deal.images),
        price=float(deal.price),
        original_price=_money(deal.original_price),
        merchant=deal.merchant,
        category=deal.category,
        deal_url=deal.deal_url,
        link_rel=link_attributes(deal.merchant)["rel"],
        discount_code=deal.discount_code,
        availability=deal.availability,
        expired=bool(deal.expired),
        start_at=deal.start_at,
        expires_at=deal.expires_at,
        created_at=deal.created_at,
        score=compute_score(deal.votes),
        comment_count=int(comment_count or 0),
        posted_by=posted_by(deal.user),
        user_vote=viewer_vote(deal.votes, viewer_id),
    )


def _deal_query():
    comment_count = _comment_count().label("comment_count")
    stmt = select(Deal, comment_count).options(
        selectinload(Deal.votes),
        selectinload(Deal.images),
    )
    return stmt, comment_count


async def list_deals(
    db: AsyncSession,
    *,
    category: str | None = None,
    sort: str = "newest",
    viewer_id: str | None = None,
) -> list[DealOut]:
    stmt, comment_count = _deal_query()
    if category:
        stmt = stmt.where(Deal.category == category)

    if sort == "comments":
        stmt = stmt.order_by(comment_count.desc(), Deal.created_at.desc())
    else:
        # hottest is ranked in memory: the score is not a column
        stmt = stmt.order_by(Deal.created_at.desc())

    res = await db.execute(stmt)
    views = [deal_view(row[0], row[1], viewer_id) for row in res.all()]
    return sort_offers(views, sort)


async def hottest_deals(db: AsyncSession, limit: int = HOTTEST_LIMIT) -> list[HottestDealOut]:
    stmt, _ = _deal_query()
    stmt = stmt.where(Deal.expired.is_(False)).order_by(Deal.created_at.desc()).limit(HOTTEST_POOL)

    res = await db.execute(stmt)
    items: list[HottestDealOut] = []
    for deal, comment_count in res.all():
        urls = image_urls(deal.images)
        items.append(
            HottestDealOut(
                id=deal.id,
                slug=deal.slug,
                title=deal.title,
                score=compute_score(deal.votes),
                price=float(deal.price),
                image_url=urls[0] if urls else None,
                deal_url=deal.deal_url,
                merchant=deal.merchant,
                category=deal.category,
                created_at=deal.created_at,
                comment_count=int(comment_count or 0),
                posted_by=posted_by(deal.user),
            )
        )

    return sort_offers(items, "hottest")[:limit]


async def get_deal(db: AsyncSession, deal_id: str, viewer_id: str | None = None) -> DealOut:
    stmt, _ = _deal_query()
    res = await db.execute(stmt.where(Deal.id == deal_id).execution_options(populate_existing=True))
    row = res.first()
    if not row:
        raise DealNotFound("Deal not found.")
    return deal_view(row[0], row[1], viewer_id)


async def related_deals(
    db: AsyncSession,
    deal_id: str,
    *,
    limit: int = RELATED_LIMIT,
    viewer_id: str | None = None,
) -> list[DealOut]:
    """Other deals sharing the category or the merchant, newest first."""
    res = await db.execute(select(Deal.category, Deal.merchant).where(Deal.id == deal_id))
    anchor = res.first()
    if anchor is None:
        raise DealNotFound("Deal not found.")

    stmt, _ = _deal_query()
    stmt = (
        stmt.where(
            Deal.id != deal_id,
            or_(Deal.category == anchor[0], Deal.merchant == anchor[1]),
        )
        .order_by(Deal.created_at.desc())
        .limit(limit)
    )
    res = await db.execute(stmt)
    return [deal_view(row[0], row[1], viewer_id) for row in res.all()]


async def check_deal_url(db: AsyncSession, url: str) -> DealSummary | None:
    stmt = (
        select(Deal)
        .options(selectinload(Deal.images))
        .where(Deal.deal_url == url)
        .order_by(Deal.created_at.asc())
        .limit(1)
    )
    res = await db.execute(stmt)
    deal = res.scalar_one_or_none()
    if deal is None:
        return None

    urls = image_urls(deal.images)
    return DealSummary(
        id=deal.id,
        slug=deal.slug,
        title=deal.title,
        deal_url=deal.deal_url,
        price=float(deal.price),
        merchant=deal.merchant,
        created_at=deal.created_at,
        image=urls[0] if urls else None,
    )


async def create_deal(db: AsyncSession, *, user: User, data: DealCreate) -> Deal:
    deal_url = str(data.deal_url)
    slug = await unique_slug(db, data.title)

    deal = Deal(
        slug=slug,
        title=data.title,
        description=data.description,
        price=Decimal(str(data.price)),
        original_price=Decimal(str(data.original_price)) if data.original_price is not None else None,
        merchant=merchant_host(deal_url),
        category=data.category,
        deal_url=deal_url,
        expires_at=data.expires_at,
        start_at=data.start_at,
        discount_code=data.discount_code or None,
        availability=data.availability.upper() if data.availability else None,
        user_id=user.id,
    )
    deal.images = [
        Image(url=url, is_cover=(i == data.cover_image_index), position=i)
        for i, url in enumerate(data.image_urls)
    ]

    db.add(deal)
    await db.commit()
    logger.info("Deal created: %s by %s", deal.slug, user.username)
    return deal


async def _load_deal(db: AsyncSession, deal_id: str) -> Deal:
    res = await db.execute(select(Deal).where(Deal.id == deal_id))
    deal = res.scalar_one_or_none()
    if deal is None:
        raise DealNotFound("Deal not found.")
    return deal


async def update_deal(db: AsyncSession, deal_id: str, data: DealUpdate) -> DealOut:
    deal = await _load_deal(db, deal_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            raise DealError(f"{field} cannot be null.")
        if field == "deal_url" and value is not None:
            value = str(value)
            deal.merchant = merchant_host(value)
        elif field in ("price", "original_price") and value is not None:
            value = Decimal(str(value))
        setattr(deal, field, value)

    await db.commit()
    return await get_deal(db, deal_id)


async def delete_deal(db: AsyncSession, deal_id: str) -> None:
    deal = await _load_deal(db, deal_id)
    await db.delete(deal)
    await db.commit()
    logger.info("Deal deleted: %s", deal.slug)
