from __future__ import annotations
"""SQLAlchemy model for the append-only publication ledger.

One row per publish attempt per platform. Rows are inserted once and never
updated or deleted; the daily quota check reads ``success`` rows only.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from promojour.database import Base, new_id
from promojour.utils.time import utc_now
from .enums import SocialPlatform, PublicationStatus, enum_values


class PublicationHistory(Base):
    __tablename__ = "publication_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    promotion_id: Mapped[str] = mapped_column(String(36), ForeignKey("promotions.id"), nullable=False, index=True)
    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    campaign_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("campaigns.id"), nullable=True)
    platform: Mapped[SocialPlatform] = mapped_column(
        Enum(SocialPlatform, name="social_platform", values_callable=enum_values),
        nullable=False,
    )
    status: Mapped[PublicationStatus] = mapped_column(
        Enum(PublicationStatus, name="publication_status", values_callable=enum_values),
        nullable=False,
    )
    post_id: Mapped[str | None] = mapped_column(String, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_publication_history_campaign_day", "campaign_id", "status", "published_at"),
    )
