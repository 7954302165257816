from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import ConfigDict, Field

from dealbies.schemas.common import CamelModel

ClickType = Literal["deal", "coupon"]


class ClickIn(CamelModel):
    model_config = ConfigDict(extra="forbid")

    slug: str = Field(..., min_length=1, max_length=255)
    type: ClickType
    original_url: str = Field(..., min_length=1)
    final_url: str = Field(..., min_length=1)
    merchant: str | None = Field(default=None, max_length=255)
    user_agent: str | None = None
    ip_address: str | None = Field(default=None, max_length=255)
    referer: str | None = None


class ClickOut(CamelModel):
    id: str
    slug: str
    type: str
    original_url: str
    final_url: str
    merchant: str | None = None
    user_agent: str | None = None
    ip_address: str | None = None
    referer: str | None = None
    created_at: dt.datetime


class ClickStat(CamelModel):
    merchant: str | None = None
    type: str
    count: int


class DailyClickStat(CamelModel):
    date: dt.date
    clicks: int
    merchants: int


class Pagination(CamelModel):
    limit: int
    offset: int
    total: int
    has_more: bool


class ClickAnalyticsOut(CamelModel):
    clicks: list[ClickOut]
    total_count: int
    stats: list[ClickStat]
    daily_stats: list[DailyClickStat]
    pagination: Pagination
