"""
Pydantic schemas for promotion stock alerts and archival.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class StoreAlertResult(BaseModel):
    store_id: str
    store: Optional[str] = None
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class AlertCheckResponse(BaseModel):
    stores_checked: int
    alerts_sent: int
    results: List[StoreAlertResult] = Field(default_factory=list)


class ArchiveResponse(BaseModel):
    archived_count: int
    promotion_ids: List[str] = Field(default_factory=list)
