from __future__ import annotations
"""SQLAlchemy model for promotions (the content unit distributed by campaigns)."""
from datetime import datetime
from typing import TYPE_CHECKING, Any
from sqlalchemy import String, Text, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .organizations import Organization
    from .stores import Store
    from .campaigns import Campaign
from promojour.database import Base, new_id
from promojour.utils.time import utc_now
from .enums import PromotionStatus, enum_values


class Promotion(Base):
    __tablename__ = "promotions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    store_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("stores.id"), nullable=True, index=True)
    # Association, not ownership: a promotion sits in at most one campaign
    campaign_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("campaigns.id"), nullable=True, index=True)

    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    video_url: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[PromotionStatus] = mapped_column(
        Enum(PromotionStatus, name="promotion_status", values_callable=enum_values),
        default=PromotionStatus.DRAFT,
        index=True,
    )
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Pricing / barcode details: original_price, discounted_price, ean_code, cta_ean_code
    attributes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, index=True)

    organization: Mapped["Organization"] = relationship("Organization", back_populates="promotions")
    store: Mapped["Store | None"] = relationship("Store")
    campaign: Mapped["Campaign | None"] = relationship("Campaign", back_populates="promotions")
