from __future__ import annotations
"""SQLAlchemy models for physical stores and their per-store settings."""
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, DateTime, Boolean, Integer, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .organizations import Organization
    from .social_connections import SocialConnection
from promojour.database import Base, new_id
from promojour.utils.time import utc_now


class Store(Base):
    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(String(36), ForeignKey("organizations.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    website_url: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    organization: Mapped["Organization"] = relationship("Organization", back_populates="stores")
    settings: Mapped["StoreSettings | None"] = relationship("StoreSettings", back_populates="store", uselist=False)
    social_connections: Mapped[list["SocialConnection"]] = relationship("SocialConnection", back_populates="store")


class StoreSettings(Base):
    __tablename__ = "store_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id"), nullable=False, unique=True)

    # Auto-publish toggles; independent of the campaign's own pacing rules
    auto_publish_facebook: Mapped[bool] = mapped_column(Boolean, default=False)
    auto_publish_instagram: Mapped[bool] = mapped_column(Boolean, default=False)

    # Promotion stock alerts (None means "use configured default")
    alert_email_enabled: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    min_active_promotions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_upcoming_promotions: Mapped[int | None] = mapped_column(Integer, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    store: Mapped["Store"] = relationship("Store", back_populates="settings")
