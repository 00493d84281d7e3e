"""
Pydantic models for image-based issue analysis.

DESIGN PRINCIPLE:
- AnalysisResult is always renderable: the classifier returns a degraded
  value instead of raising, so callers never branch on failure.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Severity(str, Enum):
    """
    Ordinal hazard classification of a detected civic issue.
    High > Medium > Low > None
    """
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NONE = "None"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]


SEVERITY_RANK = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
    Severity.NONE: 0,
}


class IssueType(str, Enum):
    """Fixed vocabulary of civic issues the vision model may report."""
    POTHOLE = "Pothole"
    GARBAGE_DUMP = "Garbage Dump"
    BROKEN_STREET_LIGHT = "Broken Street Light"
    OPEN_MANHOLE = "Open Manhole"
    WATER_LEAKAGE = "Water Leakage"
    ILLEGAL_PARKING = "Illegal Parking"
    STRAY_ANIMAL_OBSTRUCTION = "Stray Animal Obstruction"
    GRAFFITI_VANDALISM = "Graffiti/Vandalism"
    BROKEN_SIDEWALK = "Broken Sidewalk"
    NONE = "None"


# Only ever produced by the degraded (failure) result
ERROR_ISSUE_TYPE = "Error"

ISSUE_TYPE_LABELS = [issue.value for issue in IssueType]


class AnalysisResult(BaseModel):
    """
    Structured severity assessment of one submitted photo.
    """
    issue_type: str = Field(..., description="Issue label from the fixed vocabulary, or 'Error' on failure")
    severity: Severity
    confidence: int = Field(..., ge=0, le=100, description="Model confidence (0-100, not calibrated)")
    description: str = Field(..., min_length=1, description="Brief visual description of the issue")
    recommended_action: str = Field(..., min_length=1, description="Actionable step for the maintenance team")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "issue_type": "Pothole",
                "severity": "High",
                "confidence": 91,
                "description": "Deep pothole spanning most of the left lane.",
                "recommended_action": "Barricade the lane and schedule asphalt patching.",
            }
        }

    @field_validator("issue_type")
    @classmethod
    def _known_issue_type(cls, value: str) -> str:
        if value not in ISSUE_TYPE_LABELS and value != ERROR_ISSUE_TYPE:
            raise ValueError(f"Unknown issue type: {value}")
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> int:
        # bool is an int subclass; a True/False confidence is not a score
        if isinstance(value, bool):
            raise ValueError("confidence must be numeric")
        try:
            score = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"confidence must be numeric, got {value!r}")
        if score != score:  # NaN
            raise ValueError("confidence must be a finite number")
        return int(round(min(100.0, max(0.0, score))))

    @field_validator("description", "recommended_action")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @property
    def is_reportable(self) -> bool:
        """True when the analysis found an actual issue worth a ticket."""
        return self.issue_type not in (IssueType.NONE.value, ERROR_ISSUE_TYPE)
