from __future__ import annotations

import re
import secrets
import unicodedata

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.models.coupon import Coupon
from dealbies.models.deal import Deal

MAX_SLUG_BASE = 80

_NON_WORD = re.compile(r"[^a-z0-9]+")


class SlugError(Exception):
    pass


def slugify(text: str) -> str:
    value = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    value = _NON_WORD.sub("-", value.lower()).strip("-")
    return value[:MAX_SLUG_BASE].rstrip("-") or "offer"


async def slug_taken(db: AsyncSession, slug: str) -> bool:
    """Deals and coupons share one slug namespace (see /visit/{slug})."""
    res = await db.execute(select(Deal.id).where(Deal.slug == slug).limit(1))
    if res.first():
        return True
    res = await db.execute(select(Coupon.id).where(Coupon.slug == slug).limit(1))
    return res.first() is not None


async def unique_slug(db: AsyncSession, title: str, attempts: int = 5) -> str:
    base = slugify(title)
    if not await slug_taken(db, base):
        return base

    for _ in range(attempts):
        candidate = f"{base}-{secrets.token_hex(3)}"
        if not await slug_taken(db, candidate):
            return candidate

    raise SlugError("Could not allocate a unique slug.")
