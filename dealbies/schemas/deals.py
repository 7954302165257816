from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, Field, HttpUrl, model_validator

from dealbies.schemas.common import CamelModel, PostedBy, VoteType

DealSort = Literal["newest", "hottest", "comments"]


class DealOut(CamelModel):
    id: str
    slug: str
    title: str
    description: str
    image_urls: list[str] = Field(default_factory=list)
    price: float
    original_price: float | None = None
    merchant: str
    category: str
    deal_url: str
    link_rel: str = "nofollow"
    discount_code: str | None = None
    availability: str | None = None
    expired: bool
    start_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime

    score: int
    comment_count: int
    posted_by: PostedBy
    user_vote: VoteType | None = None


class HottestDealOut(CamelModel):
    id: str
    slug: str
    title: str
    score: int
    price: float
    image_url: str | None = None
    deal_url: str
    merchant: str
    category: str
    created_at: datetime
    comment_count: int
    posted_by: PostedBy


class DealCreate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    original_price: float | None = Field(default=None, ge=0)
    category: str = Field(..., min_length=1, max_length=255)
    deal_url: HttpUrl
    expires_at: datetime | None = None
    start_at: datetime | None = None
    discount_code: str | None = Field(default=None, max_length=255)
    availability: str | None = Field(default=None, max_length=32)
    image_urls: list[str] = Field(..., min_length=1)
    cover_image_index: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _cover_in_range(self):
        if self.cover_image_index >= len(self.image_urls):
            raise ValueError("coverImageIndex out of range")
        return self


class DealCreated(CamelModel):
    success: bool = True
    deal_id: str
    slug: str


class DealSummary(CamelModel):
    id: str
    slug: str
    title: str
    deal_url: str
    price: float
    merchant: str
    created_at: datetime
    image: str | None = None


class DealCheckOut(CamelModel):
    exists: bool
    deal: DealSummary | None = None


class DealUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    original_price: float | None = Field(default=None, ge=0)
    category: str | None = Field(default=None, min_length=1, max_length=255)
    deal_url: HttpUrl | None = None
    discount_code: str | None = None
    availability: str | None = None
    start_at: datetime | None = None
    expires_at: datetime | None = None
    expired: bool | None = None
