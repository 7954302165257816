from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, Field, HttpUrl

from dealbies.schemas.common import CamelModel, PostedBy, VoteType

CouponSort = Literal["newest", "hottest", "comments", "expiring"]
DiscountType = Literal["PERCENTAGE", "FIXED", "FREE_SHIPPING", "OTHER"]


class CouponOut(CamelModel):
    id: str
    slug: str
    title: str
    description: str
    discount_code: str
    discount_type: str
    discount_value: float | None = None
    merchant: str | None = None
    category: str
    coupon_url: str
    link_rel: str = "nofollow"
    image_urls: list[str] = Field(default_factory=list)
    expired: bool
    start_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime

    score: int
    comment_count: int
    posted_by: PostedBy
    user_vote: VoteType | None = None


class CouponCreate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    discount_code: str = Field(..., min_length=1, max_length=255)
    discount_type: DiscountType = "OTHER"
    discount_value: float | None = Field(default=None, ge=0)
    merchant: str | None = Field(default=None, max_length=255)
    category: str = Field(..., min_length=1, max_length=255)
    coupon_url: HttpUrl
    start_at: datetime | None = None
    expires_at: datetime | None = None
    image_urls: list[str] = Field(default_factory=list)


class CouponUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    discount_code: str | None = Field(default=None, min_length=1, max_length=255)
    discount_type: DiscountType | None = None
    discount_value: float | None = Field(default=None, ge=0)
    merchant: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=255)
    coupon_url: HttpUrl | None = None
    start_at: datetime | None = None
    expires_at: datetime | None = None
    expired: bool | None = None
