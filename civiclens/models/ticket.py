"""
Ticket model - the record an analysis seeds in the (external) ticket store.

Persistence is handled outside this service; tickets built here are drafts
handed back to the caller.
"""

import random
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from civiclens.models.analysis import AnalysisResult, Severity


class TicketStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class TicketLocation(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str = Field(..., min_length=1, max_length=500)


class Ticket(BaseModel):
    """
    Citizen report ticket.
    """
    id: str = Field(..., description="Ticket identifier, e.g. CIV-9281")
    image_reference: Optional[str] = Field(None, description="URL or storage key of the evidence image")
    issue_type: str
    severity: Severity
    status: TicketStatus = TicketStatus.OPEN
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    location: TicketLocation

    class Config:
        json_schema_extra = {
            "example": {
                "id": "CIV-9281",
                "image_reference": "https://example.com/evidence/9281.jpg",
                "issue_type": "Pothole",
                "severity": "High",
                "status": "Open",
                "timestamp": "2024-10-24T10:30:00Z",
                "location": {"lat": 12.9716, "lng": 77.5946, "address": "MG Road"},
            }
        }

    @classmethod
    def from_analysis(
        cls,
        analysis: AnalysisResult,
        location: TicketLocation,
        image_reference: Optional[str] = None,
        ticket_id: Optional[str] = None,
    ) -> "Ticket":
        """Seed a new Open ticket from a classifier result."""
        return cls(
            id=ticket_id or new_ticket_id(),
            image_reference=image_reference,
            issue_type=analysis.issue_type,
            severity=analysis.severity,
            location=location,
        )


class TicketDraftRequest(BaseModel):
    location: TicketLocation
    image_reference: Optional[str] = Field(None, max_length=2000)


def new_ticket_id() -> str:
    """Generate a ticket identifier in the CIV-#### format."""
    return f"CIV-{random.randint(0, 9999):04d}"
