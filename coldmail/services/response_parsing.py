import json
import math
import re
from typing import Any

from ..errors import MalformedResponseError
from ..models import EmailDraftSet, EmailMetrics
from .utils.constants import MAX_LISTED_ITEMS, MAX_RESPONSE_RATE, MAX_SCORE

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


def extract_response_text(data: dict[str, Any]) -> tuple[str, str]:
    output = data.get("output", []) or []
    texts: list[str] = []
    refusals: list[str] = []
    for item in output:
        if item.get("type") == "message":
            for part in item.get("content") or []:
                if part.get("type") == "output_text":
                    texts.append(part.get("text", ""))
                elif part.get("type") == "refusal":
                    refusals.append(part.get("refusal", ""))
        elif item.get("type") == "refusal":
            refusals.append(item.get("refusal", ""))
    return "\n".join([t for t in texts if t]).strip(), "\n".join(
        [r for r in refusals if r]
    ).strip()


def strip_code_fences(content: str) -> str:
    """Remove ```json / ``` wrappers; repeated until nothing changes."""
    text = content.strip()
    while True:
        stripped = _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", text)).strip()
        if stripped == text:
            return text
        text = stripped


def parse_json_content(content: str) -> dict[str, Any]:
    candidate = strip_code_fences(content or "")
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(
            f"Completion is not valid JSON: {exc.msg}", raw_content=content
        ) from exc
    if not isinstance(parsed, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(parsed).__name__}", raw_content=content
        )
    return parsed


def _required_text(raw: dict[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise MalformedResponseError(f"Missing or empty '{key}'", raw_content=json.dumps(raw))
    return value.strip()


def normalize_draft_set(raw: dict[str, Any]) -> EmailDraftSet:
    improvements = raw.get("improvements")
    if not isinstance(improvements, str) or not improvements.strip():
        improvements = None
    return EmailDraftSet(
        improvements=improvements.strip() if improvements else None,
        variant1=_required_text(raw, "variant1"),
        variant2=_required_text(raw, "variant2"),
    )


def normalize_replacement(raw: dict[str, Any]) -> str:
    return _required_text(raw, "variant2")


def _as_number(value: Any) -> float:
    # bool is an int subclass; a model answering `true` is not a score.
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def clamp_response_rate(value: Any) -> float:
    return max(0.0, min(_as_number(value), MAX_RESPONSE_RATE))


def clamp_score(value: Any) -> int:
    return max(0, min(int(round(_as_number(value))), MAX_SCORE))


def as_text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None][
        :MAX_LISTED_ITEMS
    ]


def normalize_metrics(raw: dict[str, Any]) -> EmailMetrics:
    return EmailMetrics(
        readability=clamp_score(raw.get("readability")),
        personalization_score=clamp_score(raw.get("personalizationScore")),
        value_proposition_clarity=clamp_score(raw.get("valuePropositionClarity")),
        cta_effectiveness=clamp_score(raw.get("ctaEffectiveness")),
        estimated_response_rate=clamp_response_rate(raw.get("estimatedResponseRate")),
        key_strengths=as_text_list(raw.get("keyStrengths")),
        improvement_suggestions=as_text_list(raw.get("improvementSuggestions")),
    )
