"""Tests for GPTZero AI detection with a mocked HTTP layer."""
import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import config  # noqa: E402
import detection  # noqa: E402

LONG_TEXT = "This is a reasonably long passage written for detection purposes only."


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


@pytest.fixture
def posted(monkeypatch):
    monkeypatch.setenv("GPTZERO_API_KEY", "gz-key")
    calls = []
    responses = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return responses.pop(0)

    monkeypatch.setattr(detection.requests, "post", fake_post)
    return calls, responses


@pytest.mark.parametrize("probability, label", [(0.1, "Low"), (0.4, "Medium"), (0.7, "Medium"), (0.71, "High")])
def test_confidence_label(probability, label):
    assert detection.confidence_label(probability) == label


def test_short_text_is_not_sent(posted):
    calls, _ = posted
    result = detection.detect_ai("too short")
    assert result["details"] == "Text too short for reliable detection"
    assert result["isAIGenerated"] is False
    assert calls == []


def test_non_string_input():
    assert detection.detect_ai(None)["details"] == "Invalid text format for detection"


def test_missing_key_gives_deterministic_result(monkeypatch):
    monkeypatch.delenv("GPTZERO_API_KEY", raising=False)
    first = detection.detect_ai(LONG_TEXT)
    assert first == detection.detect_ai(LONG_TEXT)
    assert first["confidence"] == "Low"
    assert first["probability"] is None
    assert "API key not configured" in first["details"]


def test_high_probability_from_documents_list(posted):
    calls, responses = posted
    responses.append(FakeResponse({"documents": [{"completely_generated_prob": 0.92}]}))
    result = detection.detect_ai(LONG_TEXT)
    assert result["isAIGenerated"] is True
    assert result["confidence"] == "High"
    assert result["probability"] == 0.92
    assert "92%" in result["details"]
    assert calls[0]["headers"]["x-api-key"] == "gz-key"
    assert calls[0]["url"] == config.GPTZERO_API_URL


def test_single_document_payload(posted):
    _, responses = posted
    responses.append(FakeResponse({"document": {"completely_generated_prob": 0.2}}))
    result = detection.detect_ai(LONG_TEXT)
    assert result["isAIGenerated"] is False
    assert result["confidence"] == "Low"


def test_long_text_is_truncated(posted):
    calls, responses = posted
    responses.append(FakeResponse({"documents": []}))
    detection.detect_ai("word " * 5000)
    assert len(calls[0]["json"]["document"]) == config.GPTZERO_MAX_CHARS


def test_http_error_is_reported_not_raised(posted):
    _, responses = posted
    responses.append(FakeResponse({}, status=401))
    result = detection.detect_ai(LONG_TEXT)
    assert result["isAIGenerated"] is False
    assert "GPTZero detection service error" in result["details"]


@pytest.mark.parametrize("payload", [
    [{"completely_generated_prob": 0.9}],
    {"documents": [None]},
    {"documents": "bad", "document": "also bad"},
    {"document": {"completely_generated_prob": "n/a"}},
])
def test_unexpected_reply_shapes_read_as_zero(posted, payload):
    _, responses = posted
    responses.append(FakeResponse(payload))
    result = detection.detect_ai(LONG_TEXT)
    assert result["isAIGenerated"] is False
    assert result["probability"] == 0.0
    assert result["confidence"] == "Low"
