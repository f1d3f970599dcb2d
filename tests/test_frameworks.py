"""Tests for framework scoring with a mocked LLM."""
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import frameworks  # noqa: E402
import providers  # noqa: E402


def _reply(overall=None, scores=(80, 70)):
    payload = {
        "scores": [
            {"metric": f"Metric {i}", "score": s, "assessment": '"quote" -> fine',
             "strengths": ["clear"], "weaknesses": "thin"}
            for i, s in enumerate(scores, start=1)
        ],
        "summary": "Solid.",
        "verdict": "Above average.",
    }
    if overall is not None:
        payload["overallScore"] = overall
    return json.dumps(payload)


@pytest.fixture
def fake_complete(monkeypatch):
    prompts = []
    replies = []

    def complete(prompt, provider=None, **kwargs):
        prompts.append((prompt, provider))
        return replies.pop(0)

    monkeypatch.setattr(providers, "complete", complete)
    return prompts, replies


@pytest.mark.parametrize("name", list(frameworks.FRAMEWORKS))
def test_every_framework_has_forty_distinct_metrics(name):
    metrics = frameworks.metrics_for(name)
    assert len(metrics) == 40
    assert len(set(metrics)) == 40


def test_unknown_framework_rejected():
    with pytest.raises(ValueError, match="Unknown framework"):
        frameworks.metrics_for("humor")


def test_prompt_lists_all_metrics_and_text():
    prompt = frameworks.create_framework_prompt("The cat sat.", "cogency")
    assert "The cat sat." in prompt
    assert "40. " + frameworks.COGENCY_METRICS[-1] in prompt
    assert "CRITICAL CALIBRATION" in prompt


def test_parse_clamps_scores_and_normalises_lists():
    result = frameworks.parse_framework_response(_reply(overall=140, scores=(120, -5)), "quality")
    assert [s["score"] for s in result["scores"]] == [100, 0]
    assert result["overallScore"] == 100
    assert result["scores"][0]["weaknesses"] == ["thin"]
    assert result["frameworkType"] == "quality"


def test_parse_uses_mean_when_overall_missing():
    result = frameworks.parse_framework_response(_reply(scores=(80, 71)), "intelligence")
    assert result["overallScore"] == 76


def test_parse_without_scores_or_overall_is_zero():
    result = frameworks.parse_framework_response('{"summary": "x"}', "intelligence")
    assert result["scores"] == []
    assert result["overallScore"] == 0


def test_unparseable_reply_gives_fallback_for_every_metric():
    result = frameworks.parse_framework_response("I cannot do that.", "originality")
    assert len(result["scores"]) == 40
    assert all(s["score"] == 50 for s in result["scores"])
    assert result["overallScore"] == 50
    assert result["verdict"] == "Analysis could not be completed due to parsing error"
    assert result["scores"][0]["assessment"] == "Analysis parsing failed"


def test_analyze_framework_records_provider(monkeypatch, fake_complete):
    prompts, replies = fake_complete
    replies.append(_reply(overall=88))
    result = frameworks.analyze_framework("Some text.", "intelligence", "Anthropic")
    assert result["overallScore"] == 88
    assert result["provider"] == "anthropic"
    assert prompts[0][1] == "anthropic"


def test_analyze_framework_requires_text(fake_complete):
    with pytest.raises(ValueError, match="Text is required"):
        frameworks.analyze_framework("   ", "intelligence", "openai")


def test_analyze_framework_rejects_unknown_provider(fake_complete):
    with pytest.raises(providers.UnknownProviderError):
        frameworks.analyze_framework("Some text.", "intelligence", "bard")


@pytest.mark.parametrize("a, b, winner", [(90, 60, "A"), (55, 70, "B"), (64, 64, "Tie")])
def test_compare_framework_winner(fake_complete, a, b, winner):
    prompts, replies = fake_complete
    replies.extend([_reply(overall=a), _reply(overall=b), "A is tighter."])
    result = frameworks.compare_framework("Text one.", "Text two.", "cogency", "openai")
    assert result["winner"] == winner
    assert result["comparison"] == "A is tighter."
    assert result["textA"]["overallScore"] == a
    assert result["textB"]["overallScore"] == b
    assert len(prompts) == 3


def test_parse_tolerates_wrong_typed_fields():
    reply = json.dumps({"scores": [{"metric": "M", "score": 60, "strengths": 5, "weaknesses": None}, "junk"]})
    result = frameworks.parse_framework_response(reply, "quality")
    assert result["scores"][0]["strengths"] == ["5"]
    assert result["scores"][0]["weaknesses"] == []
    assert len(result["scores"]) == 1


@pytest.mark.parametrize("scores", [{"metric": "M"}, "none", 7])
def test_parse_non_list_scores_is_empty(scores):
    result = frameworks.parse_framework_response(json.dumps({"scores": scores}), "quality")
    assert result["scores"] == []
    assert result["overallScore"] == 0
