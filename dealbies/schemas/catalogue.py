from __future__ import annotations

from dealbies.schemas.common import CamelModel


class CategoriesOut(CamelModel):
    deal_categories: list[str]
    coupon_categories: list[str]
    all_unique_categories: list[str]


class HealthOut(CamelModel):
    status: str
    message: str
