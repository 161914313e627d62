"""
Pydantic schemas for the campaign distribution trigger.
"""
from typing import Any, Dict, List
from pydantic import BaseModel, Field

from .base import ResponseBase


class DistributionSummaryRead(BaseModel):
    campaigns_considered: int = 0
    campaigns_processed: int = 0
    campaigns_skipped_locked: int = 0
    campaigns_failed: int = 0
    promotions_selected: int = 0
    units_published: int = 0
    units_skipped: int = 0
    units_failed: int = 0
    publish_successes: int = 0
    publish_errors: int = 0
    errors: List[Dict[str, Any]] = Field(default_factory=list)


class DistributionRunResponse(ResponseBase):
    """``success`` means the pass ran; individual publish failures live in ``summary``."""
    summary: DistributionSummaryRead
