from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, model_validator

from dealbies.schemas.common import CamelModel, VoteType


class VoteIn(CamelModel):
    model_config = ConfigDict(extra="forbid")

    deal_id: str | None = None
    coupon_id: str | None = None
    comment_id: str | None = None
    vote_type: VoteType

    @model_validator(mode="after")
    def _one_target(self):
        targets = [t for t in (self.deal_id, self.coupon_id, self.comment_id) if t]
        if len(targets) != 1:
            raise ValueError("Exactly one of dealId, couponId or commentId is required")
        return self


class VoteOut(CamelModel):
    action: Literal["created", "updated", "removed"]
    score: int
