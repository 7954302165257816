from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealbies.core.db import Base, utcnow


class Coupon(Base):
    __tablename__ = "coupons"
    __table_args__ = (
        CheckConstraint(
            "discount_type IN ('PERCENTAGE','FIXED','FREE_SHIPPING','OTHER')",
            name="coupons_discount_type_check",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    discount_code: Mapped[str] = mapped_column(String(255), nullable=False)
    discount_type: Mapped[str] = mapped_column(String(32), nullable=False, default="OTHER")
    discount_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    merchant: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    coupon_url: Mapped[str] = mapped_column(Text, nullable=False)

    start_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    expired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    user = relationship("User", lazy="selectin")
    votes = relationship("Vote", back_populates="coupon", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="coupon", cascade="all, delete-orphan", passive_deletes=True)
    images = relationship(
        "Image",
        back_populates="coupon",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Image.position",
    )
