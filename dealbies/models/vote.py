from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealbies.core.db import Base, utcnow


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("vote_type IN ('up','down')", name="votes_vote_type_check"),
        CheckConstraint(
            "(CASE WHEN deal_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN coupon_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="votes_single_target_check",
        ),
        # NULL targets never collide, so one constraint per target column
        UniqueConstraint("user_id", "deal_id", name="uq_votes_user_deal"),
        UniqueConstraint("user_id", "coupon_id", name="uq_votes_user_coupon"),
        UniqueConstraint("user_id", "comment_id", name="uq_votes_user_comment"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    deal_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("deals.id", ondelete="CASCADE"), nullable=True
    )
    coupon_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("coupons.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )

    vote_type: Mapped[str] = mapped_column(String(8), nullable=False)  # up/down

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    deal = relationship("Deal", back_populates="votes")
    coupon = relationship("Coupon", back_populates="votes")
    comment = relationship("Comment", back_populates="votes")
