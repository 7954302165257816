# dealbies/models/comment.py
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from dealbies.core.db import Base, utcnow


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint(
            "(deal_id IS NOT NULL AND coupon_id IS NULL) OR (deal_id IS NULL AND coupon_id IS NOT NULL)",
            name="comments_target_check",
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    content = Column(Text, nullable=False)

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    deal_id = Column(String(36), ForeignKey("deals.id", ondelete="CASCADE"), nullable=True, index=True)
    coupon_id = Column(String(36), ForeignKey("coupons.id", ondelete="CASCADE"), nullable=True, index=True)

    # one level of replies
    parent_id = Column(String(36), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    user = relationship("User", lazy="selectin")
    deal = relationship("Deal", back_populates="comments")
    coupon = relationship("Coupon", back_populates="comments")
    votes = relationship("Vote", back_populates="comment", cascade="all, delete-orphan", passive_deletes=True)
    replies = relationship(
        "Comment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )
