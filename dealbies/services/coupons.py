from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealbies.core.logger import get_logger
from dealbies.models.comment import Comment
from dealbies.models.coupon import Coupon
from dealbies.models.image import Image
from dealbies.models.user import User
from dealbies.schemas.coupons import CouponCreate, CouponOut, CouponUpdate
from dealbies.services.affiliate import link_attributes, merchant_from_url
from dealbies.services.deals import image_urls, posted_by
from dealbies.services.scoring import compute_score, sort_offers, viewer_vote
from dealbies.services.slugs import unique_slug

logger = get_logger("coupons")

_REQUIRED_FIELDS = {"title", "description", "discount_code", "discount_type", "category", "coupon_url"}


class CouponError(Exception):
    pass


class CouponNotFound(CouponError):
    pass


def coupon_view(coupon: Coupon, comment_count: int, viewer_id: str | None = None) -> CouponOut:
    return CouponOut(
        id=coupon.id,
        slug=coupon.slug,
        title=coupon.title,
        description=coupon.description,
        discount_code=coupon.discount_code,
        discount_type=coupon.discount_type,
        discount_value=float(coupon.discount_value) if coupon.discount_value is not None else None,
        merchant=coupon.merchant,
        category=coupon.category,
        coupon_url=coupon.coupon_url,
        link_rel=link_attributes(coupon.merchant or "")["rel"],
        image_urls=image_urls(coupon.images),
        expired=bool(coupon.expired),
        start_at=coupon.start_at,
        expires_at=coupon.expires_at,
        created_at=coupon.created_at,
        score=compute_score(coupon.votes),
        comment_count=int(comment_count or 0),
        posted_by=posted_by(coupon.user),
        user_vote=viewer_vote(coupon.votes, viewer_id),
    )


def _coupon_query():
    comment_count = (
        select(func.count(Comment.id))
        .where(Comment.coupon_id == Coupon.id)
        .correlate(Coupon)
        .scalar_subquery()
        .label("comment_count")
    )
    stmt = select(Coupon, comment_count).options(
        selectinload(Coupon.votes),
        selectinload(Coupon.images),
    )
    return stmt, comment_count


async def list_coupons(
    db: AsyncSession,
    *,
    merchant: str | None = None,
    category: str | None = None,
    sort: str = "newest",
    viewer_id: str | None = None,
) -> list[CouponOut]:
    stmt, comment_count = _coupon_query()
    if merchant:
        stmt = stmt.where(func.lower(Coupon.merchant) == merchant.lower())
    if category:
        stmt = stmt.where(Coupon.category == category)

    if sort == "comments":
        stmt = stmt.order_by(comment_count.desc(), Coupon.created_at.desc())
    else:
        stmt = stmt.order_by(Coupon.created_at.desc())

    res = await db.execute(stmt)
    views = [coupon_view(row[0], row[1], viewer_id) for row in res.all()]
    return sort_offers(views, sort)


async def get_coupon(db: AsyncSession, coupon_id: str, viewer_id: str | None = None) -> CouponOut:
    stmt, _ = _coupon_query()
    res = await db.execute(stmt.where(Coupon.id == coupon_id).execution_options(populate_existing=True))
    row = res.first()
    if not row:
        raise CouponNotFound("Coupon not found.")
    return coupon_view(row[0], row[1], viewer_id)


async def create_coupon(db: AsyncSession, *, user: User, data: CouponCreate) -> CouponOut:
    coupon_url = str(data.coupon_url)

    coupon = Coupon(
        slug=await unique_slug(db, data.title),
        title=data.title,
        description=data.description,
        discount_code=data.discount_code,
        discount_type=data.discount_type,
        discount_value=Decimal(str(data.discount_value)) if data.discount_value is not None else None,
        merchant=data.merchant or merchant_from_url(coupon_url),
        category=data.category,
        coupon_url=coupon_url,
        start_at=data.start_at,
        expires_at=data.expires_at,
        user_id=user.id,
    )
    coupon.images = [
        Image(url=url, is_cover=(i == 0), position=i)
        for i, url in enumerate(data.image_urls)
    ]

    db.add(coupon)
    await db.commit()
    logger.info("Coupon created: %s by %s", coupon.slug, user.username)

    return await get_coupon(db, coupon.id)


async def _load_coupon(db: AsyncSession, coupon_id: str) -> Coupon:
    res = await db.execute(select(Coupon).where(Coupon.id == coupon_id))
    coupon = res.scalar_one_or_none()
    if coupon is None:
        raise CouponNotFound("Coupon not found.")
    return coupon


async def update_coupon(db: AsyncSession, coupon_id: str, data: CouponUpdate) -> CouponOut:
    coupon = await _load_coupon(db, coupon_id)

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS:
            raise CouponError(f"{field} cannot be null.")
        if field == "coupon_url":
            value = str(value)
            if "merchant" not in changes:
                coupon.merchant = merchant_from_url(value)
        elif field == "discount_value" and value is not None:
            value = Decimal(str(value))
        setattr(coupon, field, value)

    await db.commit()
    return await get_coupon(db, coupon_id)


async def delete_coupon(db: AsyncSession, coupon_id: str) -> None:
    coupon = await _load_coupon(db, coupon_id)
    await db.delete(coupon)
    await db.commit()
    logger.info("Coupon deleted: %s", coupon.slug)
