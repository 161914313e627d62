"""
Pydantic schemas for publication history reads.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from promojour.models.db.enums import SocialPlatform, PublicationStatus


class PublicationHistoryRead(BaseModel):
    id: str
    promotion_id: str
    store_id: str
    campaign_id: Optional[str] = None
    platform: SocialPlatform
    status: PublicationStatus
    post_id: Optional[str] = None
    error_message: Optional[str] = None
    published_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicationHistoryPage(BaseModel):
    items: List[PublicationHistoryRead]
    total: int
    limit: int
    offset: int
