"""
Pydantic models for outbound administrative alerts.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from civiclens.models.analysis import Severity


class AlertRequest(BaseModel):
    """Data rendered into an administrative alert e-mail."""
    location: str = Field(..., min_length=1, max_length=500, description="Detected address or coordinates")
    issue_type: str = Field(..., min_length=1, max_length=100)
    severity: Severity
    image_reference: str = Field(..., min_length=1, description="URL or data URI of the evidence image")
    timestamp: datetime
    force: bool = Field(False, description="Send even when severity is below the alert threshold")


class AlertReceipt(BaseModel):
    status: str = Field(..., description="SENT or NOT_ELIGIBLE")
    message_id: Optional[str] = None
    reason: Optional[str] = None
