from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealbies.core.db import Base, utcnow


class Deal(Base):
    __tablename__ = "deals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    original_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    merchant: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    deal_url: Mapped[str] = mapped_column(Text, nullable=False)

    discount_code: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    availability: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)  # ONLINE/IN_STORE/...

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
    votes = relationship("Vote", back_populates="deal", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="deal", cascade="all, delete-orphan", passive_deletes=True)
    images = relationship(
        "Image",
        back_populates="deal",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Image.position",
    )
