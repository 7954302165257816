# dealbies/models/click_tracking.py
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, func

from dealbies.core.db import Base, utcnow


class ClickTracking(Base):
    """Append-only log of outbound affiliate clicks."""

    __tablename__ = "click_tracking"
    __table_args__ = (
        CheckConstraint("type IN ('deal','coupon')", name="click_tracking_type_check"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    slug = Column(String(255), nullable=False, index=True)
    type = Column(String(16), nullable=False)  # deal | coupon

    original_url = Column(Text, nullable=False)
    final_url = Column(Text, nullable=False)
    merchant = Column(String(255), nullable=True, index=True)

    user_agent = Column(Text, nullable=True)
    ip_address = Column(String(255), nullable=True)
    referer = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), index=True
    )
