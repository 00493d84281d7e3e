"""
Structured Issue Classifier - image to AnalysisResult.

DESIGN PRINCIPLES (CRITICAL):
- Fail soft: a broken vision call must never block the reporting flow
- The severity rubric below is policy, not documentation: it is sent
  verbatim to the model on every request
- Output is validated twice: against the declared response schema by the
  adapter, then against AnalysisResult here
"""

import logging
from typing import Optional

from pydantic import ValidationError

from civiclens.core.settings import settings
from civiclens.models.analysis import (
    ERROR_ISSUE_TYPE,
    ISSUE_TYPE_LABELS,
    AnalysisResult,
    Severity,
)
from civiclens.services.gemini import (
    GenerationRequest,
    ImagePart,
    MalformedResponseError,
    ModelClient,
    ResponseContract,
    ResponseSchema,
)

logger = logging.getLogger(__name__)


SUPPORTED_IMAGE_TYPES = ("image/jpeg", "image/png")

SEVERITY_RUBRIC = {
    Severity.HIGH: "Immediate danger to life or vehicles (e.g., open manhole, deep pothole on a through road).",
    Severity.MEDIUM: "Potential hazard or significant sanitation issue (e.g., garbage pile, shallow pothole).",
    Severity.LOW: "Cosmetic issue or minor nuisance (e.g., faded paint, small litter).",
    Severity.NONE: "The image shows no qualifying civic issue.",
}

ANALYSIS_SCHEMA = ResponseSchema(
    properties={
        "issue_type": {"type": "string", "enum": ISSUE_TYPE_LABELS},
        "severity": {"type": "string", "enum": [s.value for s in Severity]},
        "confidence": {"type": "number"},
        "description": {"type": "string"},
        "recommended_action": {"type": "string"},
    },
    required=["issue_type", "confidence", "severity", "recommended_action", "description"],
)

DEGRADED_ANALYSIS = AnalysisResult(
    issue_type=ERROR_ISSUE_TYPE,
    severity=Severity.LOW,
    confidence=0,
    description="Failed to analyze image. Please try again.",
    recommended_action="Retry upload.",
)


def _render_instructions() -> str:
    issue_lines = "\n".join(f"- {label}" for label in ISSUE_TYPE_LABELS)
    rubric_lines = "\n".join(f"- {severity.value}: {rule}" for severity, rule in SEVERITY_RUBRIC.items())
    return f"""You are an expert AI Civil Engineer and Public Safety Inspector for "CivicLens".
Analyze the provided image to identify civic infrastructure issues.

Possible Issue Types:
{issue_lines}
(use None if the image looks normal or irrelevant)

Severity Criteria:
{rubric_lines}

Provide a structured analysis returning exactly:
- issue_type: The category of the problem.
- confidence: A score from 0-100.
- severity: High, Medium, Low, or None.
- recommended_action: A short, actionable step for the maintenance team.
- description: A brief visual description of the issue."""


CLASSIFIER_INSTRUCTIONS = _render_instructions()


def build_classification_prompt(location_hint: Optional[str] = None) -> str:
    """Fixed instructions, optionally followed by the reporter's location."""
    if location_hint and location_hint.strip():
        return (
            f"{CLASSIFIER_INSTRUCTIONS}\n\n"
            f"Context: The image was reported at location: {location_hint.strip()}. "
            f"Consider this in your analysis if relevant."
        )
    return CLASSIFIER_INSTRUCTIONS


class IssueClassifier:
    """
    Maps an uploaded photo to an AnalysisResult.

    classify() never raises for service failures; it returns
    DEGRADED_ANALYSIS instead.
    """

    def __init__(self, client: ModelClient, model: Optional[str] = None):
        self.client = client
        self.model = model or settings.GEMINI_VISION_MODEL

    async def classify(
        self,
        image_bytes: bytes,
        mime_type: str = "image/jpeg",
        location_hint: Optional[str] = None,
    ) -> AnalysisResult:
        try:
            request = GenerationRequest(
                model=self.model,
                prompt=build_classification_prompt(location_hint),
                contract=ResponseContract.JSON,
                image=ImagePart(data=image_bytes, mime_type=mime_type),
                schema=ANALYSIS_SCHEMA,
            )
            response = await self.client.generate(request)
            return decode_analysis(response.data)

        except Exception as e:
            logger.warning(f"⚠️ Image analysis failed: {e}")
            return DEGRADED_ANALYSIS


def decode_analysis(data) -> AnalysisResult:
    """Build an AnalysisResult from schema-validated JSON."""
    if not isinstance(data, dict):
        raise MalformedResponseError("Analysis payload is not an object")
    try:
        return AnalysisResult(**data)
    except ValidationError as e:
        raise MalformedResponseError(f"Analysis payload rejected: {e}") from e


def detect_image_mime(data: bytes) -> Optional[str]:
    """Identify JPEG / PNG payloads by signature; None for anything else."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    return None
