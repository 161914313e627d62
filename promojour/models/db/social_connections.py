from __future__ import annotations
"""SQLAlchemy model for per-store OAuth credentials on social platforms."""
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import String, Text, DateTime, Boolean, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

if TYPE_CHECKING:  # pragma: no cover
    from .stores import Store
from promojour.database import Base, new_id
from promojour.utils.time import utc_now
from .enums import SocialPlatform, enum_values


class SocialConnection(Base):
    __tablename__ = "social_connections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    store_id: Mapped[str] = mapped_column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    platform: Mapped[SocialPlatform] = mapped_column(
        Enum(SocialPlatform, name="social_platform", values_callable=enum_values),
        nullable=False,
    )
    # Facebook page id / Instagram business user id
    account_id: Mapped[str | None] = mapped_column(String, nullable=True)
    account_name: Mapped[str | None] = mapped_column(String, nullable=True)
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_connected: Mapped[bool] = mapped_column(Boolean, default=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    store: Mapped["Store"] = relationship("Store", back_populates="social_connections")

    __table_args__ = (
        UniqueConstraint("store_id", "platform", name="unique_store_platform_connection"),
    )

    @property
    def is_usable(self) -> bool:
        # is_connected alone is not trusted: a disconnected token may linger
        return bool(self.is_connected) and self.access_token is not None
