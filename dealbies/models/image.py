# dealbies/models/image.py
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from dealbies.core.db import Base, utcnow


class Image(Base):
    __tablename__ = "images"
    __table_args__ = (
        CheckConstraint(
            "(deal_id IS NOT NULL) OR (coupon_id IS NOT NULL)",
            name="images_owner_check",
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # uploaded to the CDN elsewhere; we only keep the references
    url = Column(Text, nullable=False)
    cdn_url = Column(Text, nullable=True)

    is_cover = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    deal_id = Column(String(36), ForeignKey("deals.id", ondelete="CASCADE"), nullable=True, index=True)
    coupon_id = Column(String(36), ForeignKey("coupons.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    deal = relationship("Deal", back_populates="images")
    coupon = relationship("Coupon", back_populates="images")

    @property
    def public_url(self) -> str:
        return self.cdn_url or self.url
