import json

import pytest

from coldmail.errors import MalformedResponseError
from coldmail.services.response_parsing import (
    clamp_response_rate,
    extract_response_text,
    normalize_draft_set,
    normalize_metrics,
    normalize_replacement,
    parse_json_content,
    strip_code_fences,
)

DRAFTS = {"variant1": "Hi Jane...", "variant2": "Hello Jane..."}


@pytest.mark.parametrize(
    "wrapped",
    [
        "```json\n" + json.dumps(DRAFTS) + "\n```",
        "```JSON " + json.dumps(DRAFTS) + "```",
        "```\n" + json.dumps(DRAFTS) + "\n```\n",
        "  ```json\n```json\n" + json.dumps(DRAFTS) + "\n```\n```  ",
        json.dumps(DRAFTS),
    ],
)
def test_strip_code_fences_is_idempotent(wrapped):
    once = strip_code_fences(wrapped)

    assert strip_code_fences(once) == once
    assert json.loads(once) == DRAFTS


def test_parse_json_content_reads_fenced_object():
    assert parse_json_content("```json\n" + json.dumps(DRAFTS) + "\n```") == DRAFTS


@pytest.mark.parametrize("content", ["Sorry, I can't help", "", "[1, 2, 3]", '"just a string"'])
def test_parse_json_content_rejects_non_objects(content):
    with pytest.raises(MalformedResponseError) as excinfo:
        parse_json_content(content)

    assert excinfo.value.raw_content == content


def test_draft_set_without_improvements():
    drafts = normalize_draft_set(DRAFTS)

    assert drafts.improvements is None
    assert drafts.variant1 == "Hi Jane..."
    assert drafts.variant2 == "Hello Jane..."


@pytest.mark.parametrize("improvements", [None, "", "   ", 42])
def test_blank_or_odd_improvements_are_treated_as_absent(improvements):
    drafts = normalize_draft_set({**DRAFTS, "improvements": improvements})

    assert drafts.improvements is None


def test_draft_set_keeps_improvements_text():
    drafts = normalize_draft_set({**DRAFTS, "improvements": "Pain Points:\nOriginal: a\n"})

    assert drafts.improvements == "Pain Points:\nOriginal: a"


@pytest.mark.parametrize("raw", [{"variant1": "Hi"}, {"variant1": "Hi", "variant2": "  "}, {"variant1": 3, "variant2": "x"}])
def test_draft_set_requires_both_variants(raw):
    with pytest.raises(MalformedResponseError):
        normalize_draft_set(raw)


def test_replacement_reads_variant2():
    assert normalize_replacement({"variant2": " New email "}) == "New email"
    with pytest.raises(MalformedResponseError):
        normalize_replacement({"variant1": "wrong key"})


@pytest.mark.parametrize("rate", [-3, -0.1, 0, 0.1, 2.5, 5, 5.01, 12, 1e9])
def test_response_rate_clamp_law(rate):
    assert clamp_response_rate(rate) == max(0, min(rate, 5))


@pytest.mark.parametrize("rate", [None, "lots", [], {}, True, float("nan")])
def test_response_rate_defaults_to_zero(rate):
    assert clamp_response_rate(rate) == 0


def test_response_rate_accepts_percent_strings():
    assert clamp_response_rate("3.5%") == 3.5


@pytest.mark.parametrize("value", [None, "a, b, c", {"a": 1}, 7])
def test_list_fields_default_to_empty(value):
    metrics = normalize_metrics({"keyStrengths": value, "improvementSuggestions": value})

    assert metrics.key_strengths == []
    assert metrics.improvement_suggestions == []


def test_list_fields_absent_default_to_empty():
    metrics = normalize_metrics({})

    assert metrics.key_strengths == []
    assert metrics.improvement_suggestions == []
    assert metrics.estimated_response_rate == 0


def test_metrics_normalization():
    metrics = normalize_metrics(
        {
            "readability": 8,
            "personalizationScore": 7.6,
            "valuePropositionClarity": 14,
            "ctaEffectiveness": "n/a",
            "estimatedResponseRate": 12,
            "keyStrengths": ["Short", "Names the company", "Clear ask", "Extra"],
            "improvementSuggestions": ["Cut line two", 3, None],
        }
    )

    assert metrics.readability == 8
    assert metrics.personalization_score == 8
    assert metrics.value_proposition_clarity == 10
    assert metrics.cta_effectiveness == 0
    assert metrics.estimated_response_rate == 5
    assert metrics.key_strengths == ["Short", "Names the company", "Clear ask"]
    assert metrics.improvement_suggestions == ["Cut line two", "3"]


def test_extract_response_text_collects_output_and_refusals():
    data = {
        "output": [
            {"type": "reasoning", "summary": []},
            {
                "type": "message",
                "content": [
                    {"type": "output_text", "text": '{"variant1": "a",'},
                    {"type": "output_text", "text": '"variant2": "b"}'},
                ],
            },
        ]
    }
    text, refusal = extract_response_text(data)

    assert text == '{"variant1": "a",\n"variant2": "b"}'
    assert refusal == ""

    refused = {"output": [{"type": "message", "content": [{"type": "refusal", "refusal": "No."}]}]}
    assert extract_response_text(refused) == ("", "No.")
