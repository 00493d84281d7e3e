"""Tests for civiclens.services.issue_classifier."""

import pytest

from civiclens.models.analysis import AnalysisResult, Severity
from civiclens.services.gemini import EmptyResultError, MalformedResponseError, ResponseContract
from civiclens.services.issue_classifier import (
    ANALYSIS_SCHEMA,
    CLASSIFIER_INSTRUCTIONS,
    DEGRADED_ANALYSIS,
    IssueClassifier,
    build_classification_prompt,
    decode_analysis,
    detect_image_mime,
)

from helpers import JPEG_BYTES, PNG_BYTES, FailingModelClient, FakeModelClient, raw


class TestClassify:
    async def test_valid_response_passes_through(self, valid_analysis):
        classifier = IssueClassifier(FakeModelClient(raw(data=valid_analysis)), model="vision")
        result = await classifier.classify(JPEG_BYTES)
        assert result == AnalysisResult(**valid_analysis)
        assert result.severity is Severity.HIGH
        assert result.confidence == 92

    async def test_request_carries_image_and_schema(self, valid_analysis):
        client = FakeModelClient(raw(data=valid_analysis))
        await IssueClassifier(client, model="vision").classify(PNG_BYTES, mime_type="image/png")
        request = client.requests[0]
        assert request.model == "vision"
        assert request.contract is ResponseContract.JSON
        assert request.schema is ANALYSIS_SCHEMA
        assert request.image.data == PNG_BYTES
        assert request.image.mime_type == "image/png"
        assert request.prompt == CLASSIFIER_INSTRUCTIONS

    async def test_location_hint_reaches_prompt(self, valid_analysis):
        client = FakeModelClient(raw(data=valid_analysis))
        await IssueClassifier(client).classify(JPEG_BYTES, location_hint="MG Road, Bengaluru")
        assert "MG Road, Bengaluru" in client.requests[0].prompt

    async def test_confidence_is_clamped(self, valid_analysis):
        payload = dict(valid_analysis, confidence=140)
        result = await IssueClassifier(FakeModelClient(raw(data=payload))).classify(JPEG_BYTES)
        assert result.confidence == 100

    @pytest.mark.parametrize("error", [
        EmptyResultError("empty"),
        MalformedResponseError("garbage"),
        RuntimeError("unexpected"),
    ])
    async def test_failures_return_degraded_value(self, error):
        result = await IssueClassifier(FakeModelClient(error)).classify(JPEG_BYTES)
        assert result == DEGRADED_ANALYSIS

    async def test_unknown_issue_type_degrades(self, valid_analysis):
        payload = dict(valid_analysis, issue_type="Alien Landing")
        result = await IssueClassifier(FakeModelClient(raw(data=payload))).classify(JPEG_BYTES)
        assert result is DEGRADED_ANALYSIS

    async def test_repeated_failures_are_idempotent(self):
        classifier = IssueClassifier(FailingModelClient())
        results = [await classifier.classify(JPEG_BYTES) for _ in range(3)]
        assert results == [DEGRADED_ANALYSIS] * 3


class TestDegradedAnalysis:
    def test_fields(self):
        assert DEGRADED_ANALYSIS.issue_type == "Error"
        assert DEGRADED_ANALYSIS.severity is Severity.LOW
        assert DEGRADED_ANALYSIS.confidence == 0
        assert DEGRADED_ANALYSIS.description == "Failed to analyze image. Please try again."
        assert DEGRADED_ANALYSIS.recommended_action == "Retry upload."
        assert DEGRADED_ANALYSIS.is_reportable is False


class TestPrompt:
    def test_instructions_list_vocabulary_and_rubric(self):
        for label in ("Pothole", "Open Manhole", "Graffiti/Vandalism"):
            assert label in CLASSIFIER_INSTRUCTIONS
        assert "Immediate danger" in CLASSIFIER_INSTRUCTIONS

    def test_blank_hint_is_ignored(self):
        assert build_classification_prompt("   ") == CLASSIFIER_INSTRUCTIONS
        assert build_classification_prompt(None) == CLASSIFIER_INSTRUCTIONS


class TestDecodeAnalysis:
    def test_non_object_rejected(self):
        with pytest.raises(MalformedResponseError):
            decode_analysis(["Pothole"])

    def test_blank_description_rejected(self, valid_analysis):
        with pytest.raises(MalformedResponseError):
            decode_analysis(dict(valid_analysis, description="  "))


class TestDetectImageMime:
    def test_signatures(self):
        assert detect_image_mime(JPEG_BYTES) == "image/jpeg"
        assert detect_image_mime(PNG_BYTES) == "image/png"
        assert detect_image_mime(b"GIF89a") is None
        assert detect_image_mime(b"") is None
