from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field, model_validator

from dealbies.schemas.common import CamelModel, PostedBy, VoteType


class CommentOut(CamelModel):
    id: str
    content: str
    created_at: datetime
    posted_by: PostedBy
    score: int
    user_vote: VoteType | None = None
    replies: list["CommentOut"] = Field(default_factory=list)


class CommentCreate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    content: str = Field(..., min_length=1, max_length=5000)
    deal_id: str | None = None
    coupon_id: str | None = None
    parent_id: str | None = None

    @model_validator(mode="after")
    def _one_target(self):
        if (self.deal_id is None) == (self.coupon_id is None):
            raise ValueError("Exactly one of dealId or couponId is required")
        return self


CommentOut.model_rebuild()
