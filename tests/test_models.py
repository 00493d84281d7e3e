"""Tests for civiclens.models: validation and ordinal rules."""

import re

import pytest
from pydantic import ValidationError

from civiclens.models.analysis import AnalysisResult, IssueType, Severity
from civiclens.models.geocode import GeocodeResult
from civiclens.models.ticket import Ticket, TicketLocation, TicketStatus, new_ticket_id


class TestAnalysisResult:
    def test_accepts_valid_payload(self, valid_analysis):
        result = AnalysisResult(**valid_analysis)
        assert result.issue_type == "Pothole"
        assert result.severity is Severity.HIGH
        assert result.confidence == 92

    @pytest.mark.parametrize("raw_score, expected", [(150, 100), (-4, 0), (87.6, 88), ("73", 73)])
    def test_confidence_is_clamped_and_rounded(self, valid_analysis, raw_score, expected):
        valid_analysis["confidence"] = raw_score
        assert AnalysisResult(**valid_analysis).confidence == expected

    @pytest.mark.parametrize("bad_score", [None, "high", True, float("nan")])
    def test_non_numeric_confidence_rejected(self, valid_analysis, bad_score):
        valid_analysis["confidence"] = bad_score
        with pytest.raises(ValidationError):
            AnalysisResult(**valid_analysis)

    def test_unknown_issue_type_rejected(self, valid_analysis):
        valid_analysis["issue_type"] = "Alien Landing"
        with pytest.raises(ValidationError):
            AnalysisResult(**valid_analysis)

    def test_error_issue_type_allowed(self, valid_analysis):
        valid_analysis["issue_type"] = "Error"
        assert AnalysisResult(**valid_analysis).issue_type == "Error"

    def test_blank_description_rejected(self, valid_analysis):
        valid_analysis["description"] = "   "
        with pytest.raises(ValidationError):
            AnalysisResult(**valid_analysis)

    def test_is_immutable(self, valid_analysis):
        result = AnalysisResult(**valid_analysis)
        with pytest.raises(ValidationError):
            result.confidence = 10

    @pytest.mark.parametrize("issue_type, reportable", [("Pothole", True), ("None", False), ("Error", False)])
    def test_is_reportable(self, valid_analysis, issue_type, reportable):
        valid_analysis["issue_type"] = issue_type
        assert AnalysisResult(**valid_analysis).is_reportable is reportable


class TestSeverity:
    def test_ordinal_ranking(self):
        ranked = sorted(Severity, key=lambda s: s.rank, reverse=True)
        assert ranked == [Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.NONE]

    def test_vocabulary_has_ten_labels(self):
        assert len(IssueType) == 10
        assert IssueType.GRAFFITI_VANDALISM.value == "Graffiti/Vandalism"


class TestGeocodeResult:
    def test_missing_map_link_is_omitted_from_output(self):
        result = GeocodeResult(address="MG Road, Bengaluru")
        assert result.model_dump(exclude_none=True) == {"address": "MG Road, Bengaluru"}


class TestTicket:
    def test_new_ticket_id_format(self):
        assert re.fullmatch(r"CIV-\d{4}", new_ticket_id())

    def test_from_analysis_seeds_open_ticket(self, valid_analysis):
        analysis = AnalysisResult(**valid_analysis)
        location = TicketLocation(lat=12.9716, lng=77.5946, address="MG Road")
        ticket = Ticket.from_analysis(analysis, location, image_reference="https://img/1.jpg", ticket_id="CIV-0001")
        assert ticket.id == "CIV-0001"
        assert ticket.status is TicketStatus.OPEN
        assert ticket.issue_type == "Pothole"
        assert ticket.severity is Severity.HIGH
        assert ticket.location.address == "MG Road"
        assert ticket.timestamp.tzinfo is not None

    def test_location_range_validated(self):
        with pytest.raises(ValidationError):
            TicketLocation(lat=91, lng=0, address="nowhere")
