from __future__ import annotations
"""SQLAlchemy model for tenant organizations (retail chains / brands)."""
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .stores import Store
    from .campaigns import Campaign
    from .promotions import Promotion
from promojour.database import Base, new_id
from promojour.utils.time import utc_now


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, index=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    stores: Mapped[list["Store"]] = relationship("Store", back_populates="organization")
    campaigns: Mapped[list["Campaign"]] = relationship("Campaign", back_populates="organization")
    promotions: Mapped[list["Promotion"]] = relationship("Promotion", back_populates="organization")
