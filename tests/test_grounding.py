"""Tests for civiclens.services.gemini.grounding: extraction never faults."""

import pytest

from civiclens.services.gemini.grounding import chunk_citation, extract_grounding_chunks, extract_text


MALFORMED_PAYLOADS = [
    None,
    "not a dict",
    {},
    {"candidates": None},
    {"candidates": "oops"},
    {"candidates": []},
    {"candidates": [None]},
    {"candidates": [{"content": None}]},
    {"candidates": [{"content": {"parts": "text"}}]},
    {"candidates": [{"groundingMetadata": None}]},
    {"candidates": [{"groundingMetadata": {"groundingChunks": {"web": {}}}}]},
]


class TestExtractText:
    @pytest.mark.parametrize("payload", MALFORMED_PAYLOADS)
    def test_malformed_payload_yields_empty_string(self, payload):
        assert extract_text(payload) == ""

    def test_joins_text_parts_and_skips_thoughts(self):
        payload = {"candidates": [{"content": {"parts": [
            {"text": "thinking...", "thought": True},
            {"text": "Hello "},
            {"inline_data": {}},
            {"text": "world"},
        ]}}]}
        assert extract_text(payload) == "Hello world"


class TestExtractGroundingChunks:
    @pytest.mark.parametrize("payload", MALFORMED_PAYLOADS)
    def test_malformed_payload_yields_empty_list(self, payload):
        assert extract_grounding_chunks(payload) == []

    def test_keeps_only_dict_chunks(self):
        payload = {"candidates": [{"groundingMetadata": {"groundingChunks": [
            {"web": {"uri": "a", "title": "A"}}, None, "junk", {"maps": {"uri": "m"}},
        ]}}]}
        assert extract_grounding_chunks(payload) == [
            {"web": {"uri": "a", "title": "A"}},
            {"maps": {"uri": "m"}},
        ]


class TestChunkCitation:
    def test_reads_web_citation(self):
        assert chunk_citation({"web": {"uri": "u", "title": "t"}}) == {"uri": "u", "title": "t"}

    def test_reads_maps_citation(self):
        assert chunk_citation({"maps": {"uri": "u"}}, "maps") == {"uri": "u", "title": None}

    @pytest.mark.parametrize("chunk", [None, {}, {"web": None}, {"web": {"uri": 5, "title": ["x"]}}])
    def test_missing_or_mistyped_fields_are_none(self, chunk):
        assert chunk_citation(chunk) == {"uri": None, "title": None}
