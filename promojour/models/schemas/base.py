"""
Envelopes shared by the job endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from promojour.utils.time import utc_now


class ResponseBase(BaseModel):
    """``{success, message, timestamp}`` returned when a job ran."""
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)


class ErrorResponse(BaseModel):
    """Body returned when a job endpoint fails as a whole."""
    error: str
    details: Optional[str] = None
