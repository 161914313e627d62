from __future__ import annotations
"""SQLAlchemy model for promotional campaigns (scheduling envelopes)."""
from datetime import date, datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, Text, Date, DateTime, Integer, Boolean, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .organizations import Organization
    from .stores import Store
    from .promotions import Promotion
from promojour.database import Base, new_id
from promojour.utils.time import utc_now
from .enums import CampaignStatus, enum_values


class Campaign(Base):
    __tablename__ = "campaigns"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    # Null = every active store of the organization
    store_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("stores.id"), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[CampaignStatus] = mapped_column(
        Enum(CampaignStatus, name="campaign_status", values_callable=enum_values),
        default=CampaignStatus.DRAFT,
        index=True,
    )
    daily_promotion_count: Mapped[int] = mapped_column(Integer, default=1)
    random_order: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    organization: Mapped["Organization"] = relationship("Organization", back_populates="campaigns")
    store: Mapped["Store | None"] = relationship("Store")
    promotions: Mapped[list["Promotion"]] = relationship("Promotion", back_populates="campaign")

    __table_args__ = (
        CheckConstraint("daily_promotion_count >= 0", name="campaign_daily_count_non_negative"),
    )
