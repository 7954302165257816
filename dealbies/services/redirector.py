from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.logger import get_logger
from dealbies.models.coupon import Coupon
from dealbies.models.deal import Deal
from dealbies.schemas.clicks import ClickIn
from dealbies.services.affiliate import attach_affiliate_params, is_web_url
from dealbies.services.clicks import record_click

logger = get_logger("redirector")

NOT_FOUND_PATH = "/not-found"
FALLBACK_PATH = "/"


@dataclass(frozen=True)
class ClientMeta:
    user_agent: str | None = None
    ip_address: str | None = None
    referer: str | None = None


@dataclass(frozen=True)
class Offer:
    kind: str  # deal | coupon
    slug: str
    title: str
    url: str
    merchant: str | None
    expired: bool


async def find_offer(db: AsyncSession, slug: str) -> Offer | None:
    """Deal slugs take priority over coupon slugs."""
    res = await db.execute(
        select(Deal.title, Deal.deal_url, Deal.merchant, Deal.expired).where(Deal.slug == slug)
    )
    row = res.first()
    if row:
        return Offer("deal", slug, row[0], row[1], row[2], bool(row[3]))

    res = await db.execute(
        select(Coupon.title, Coupon.coupon_url, Coupon.merchant, Coupon.expired).where(Coupon.slug == slug)
    )
    row = res.first()
    if row:
        return Offer("coupon", slug, row[0], row[1], row[2], bool(row[3]))

    return None


async def resolve_visit(db: AsyncSession, slug: str, meta: ClientMeta) -> str:
    """Return where ``/visit/{slug}`` should send the browser.

    Relative paths point back into the site; anything else is the merchant URL
    with affiliate parameters attached. A click is logged only for the latter.
    Stored destinations that are not absolute http(s) URLs land on ``/``.
    """
    offer = await find_offer(db, slug)
    if offer is None:
        return NOT_FOUND_PATH

    if offer.expired:
        return f"/{offer.kind}/{slug}"

    final_url = attach_affiliate_params(offer.url, offer.merchant)
    if not is_web_url(final_url):
        logger.warning("Unusable destination for %s %r: %r", offer.kind, slug, offer.url)
        return FALLBACK_PATH

    await record_click(
        db,
        ClickIn(
            slug=slug,
            type=offer.kind,
            original_url=offer.url,
            final_url=final_url,
            merchant=offer.merchant,
            user_agent=meta.user_agent,
            ip_address=meta.ip_address,
            referer=meta.referer,
        ),
    )
    logger.info("%s click tracked: %s (%s)", offer.kind.capitalize(), offer.title, offer.merchant)

    return final_url
