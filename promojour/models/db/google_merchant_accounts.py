from __future__ import annotations
"""SQLAlchemy model for a store's Google Merchant Center link."""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column

from promojour.database import Base, new_id
from .stores import Store


class GoogleMerchantAccount(Base):
    __tablename__ = "google_merchant_accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id"), nullable=False, unique=True)
    google_merchant_account_id: Mapped[str | None] = mapped_column(String, nullable=True)
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    store: Mapped[Store] = relationship("Store")
