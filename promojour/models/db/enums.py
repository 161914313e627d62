"""Central Enum definitions for core domain states.

Values mirror the Postgres enum types (lowercase strings) so rows written by
other services stay readable here.
"""
from __future__ import annotations
import enum


class CampaignStatus(str, enum.Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class PromotionStatus(str, enum.Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EXPIRED = "expired"
    ARCHIVED = "archived"


class SocialPlatform(str, enum.Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    GOOGLE_BUSINESS = "google_business"


class PublicationStatus(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


class MediaKind(str, enum.Enum):
    VIDEO = "video"
    IMAGE = "image"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum *values* (not member names) in the database."""
    return [member.value for member in enum_cls]


__all__ = [
    "CampaignStatus",
    "PromotionStatus",
    "SocialPlatform",
    "PublicationStatus",
    "MediaKind",
    "enum_values",
]
