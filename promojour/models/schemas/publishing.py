"""
Pydantic schemas for manual Reel / post publishing.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from promojour.models.db.enums import SocialPlatform


class PublishRequest(BaseModel):
    promotion_id: str = Field(min_length=1)
    store_id: str = Field(min_length=1)
    platforms: List[SocialPlatform] = Field(min_length=1, description="facebook and/or instagram")
    campaign_id: Optional[str] = None


class PlatformResult(BaseModel):
    platform: SocialPlatform
    success: bool
    post_id: Optional[str] = None
    error: Optional[str] = None


class PublishResponse(BaseModel):
    success: bool
    results: List[PlatformResult]
    promotion_url: str
