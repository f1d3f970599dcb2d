"""Tests for revision diffs and the enhanced passage comparison."""
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import compare  # noqa: E402
import providers  # noqa: E402


def test_tag_word_diff_marks_deletions_and_insertions():
    original, revised = compare.tag_word_diff("the quick fox", "the slow fox")
    assert original == "the <del>quick</del> fox"
    assert revised == "the <ins>slow</ins> fox"


def test_diff_revision_is_per_paragraph():
    changes = compare.diff_revision("Same here.\n\nOld words.", "Same here.\n\nNew words.\n\nExtra.")
    assert [c["paragraph"] for c in changes] == [1, 2, 3]
    assert [c["changed"] for c in changes] == [False, True, True]
    assert changes[2]["original"] == ""
    assert changes[2]["revised"] == "<ins>Extra.</ins>"


def test_compare_passages_normalises_reply(monkeypatch):
    reply = {
        "overallSimilarityScore": 140,
        "ripOffRisk": {"label": "Possibly derivative", "explanation": "shared frame",
                       "matchingSections": ["both open with Kant"]},
        "developmentRelationship": {"direction": "B extends A somehow", "description": "loosely"},
        "doctrinalAffinity": {"classification": "Doctrinally kindred", "justification": "same school",
                              "contentAgreement": 25, "methodologicalSimilarity": "6"},
        "detailedAnalysis": "Long analysis.",
    }
    prompts = []

    def complete(prompt, provider=None, **kwargs):
        prompts.append(prompt)
        return "```json\n" + json.dumps(reply) + "\n```"

    monkeypatch.setattr(providers, "complete", complete)
    result = compare.compare_passages("First text.", "Second text.", title_a="Essay", title_b="Reply")
    assert result["overallSimilarityScore"] == 100
    assert result["ripOffRisk"]["matchingSections"] == ["both open with Kant"]
    assert result["developmentRelationship"]["direction"] == "no development"
    assert result["doctrinalAffinity"]["classification"] == "Doctrinally kindred"
    assert result["doctrinalAffinity"]["contentAgreement"] == 10
    assert result["doctrinalAffinity"]["methodologicalSimilarity"] == 6
    assert "ESSAY:" in prompts[0] and "REPLY:" in prompts[0]


def test_compare_passages_unparseable_reply(monkeypatch):
    monkeypatch.setattr(providers, "complete", lambda prompt, **kwargs: "they are similar")
    with pytest.raises(ValueError):
        compare.compare_passages("First text.", "Second text.")


def test_compare_passages_requires_both_texts():
    with pytest.raises(ValueError, match="Both texts"):
        compare.compare_passages("First text.", "")


def test_compare_passages_tolerates_flat_sections(monkeypatch):
    reply = {
        "overallSimilarityScore": 30,
        "ripOffRisk": "Low",
        "developmentRelationship": ["B extends A"],
        "doctrinalAffinity": 4,
    }
    monkeypatch.setattr(providers, "complete", lambda prompt, **kwargs: json.dumps(reply))
    result = compare.compare_passages("First text.", "Second text.")
    assert result["ripOffRisk"] == {"label": "Unrelated", "explanation": "", "matchingSections": []}
    assert result["developmentRelationship"]["direction"] == "no development"
    assert result["doctrinalAffinity"]["classification"] == "Ambiguous / Neutral"


@pytest.mark.parametrize("sections, expected", [("opening paragraph", ["opening paragraph"]), (3, ["3"])])
def test_compare_passages_scalar_matching_sections(monkeypatch, sections, expected):
    reply = {"ripOffRisk": {"label": "Possibly derivative", "matchingSections": sections}}
    monkeypatch.setattr(providers, "complete", lambda prompt, **kwargs: json.dumps(reply))
    result = compare.compare_passages("First text.", "Second text.")
    assert result["ripOffRisk"]["matchingSections"] == expected
