import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..config import DEFAULT_LOG_PATH, DEFAULT_MODEL_NAME
from ..errors import EmailServiceError, MalformedResponseError, ValidationError
from ..logging_utils import append_ndjson, utc_now_iso
from ..models import EmailDraftSet, EmailMetrics, GenerateEmailRequest
from .openai_client import OpenAIResponsesClient
from .prompting import (
    ANALYSIS_SYSTEM_PROMPT,
    GENERATION_SYSTEM_PROMPT,
    REGENERATION_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_generation_prompt,
    build_legacy_prompt,
    build_messages,
    build_regeneration_prompt,
)
from .response_parsing import (
    normalize_draft_set,
    normalize_metrics,
    normalize_replacement,
    parse_json_content,
)
from .utils.constants import ANALYSIS_SCHEMA, GENERATION_SCHEMA, REGENERATION_SCHEMA

REQUIRED_FIELDS = (
    ("prospect", "name", "name"),
    ("prospect", "company", "company"),
    ("prospect", "role", "role"),
    ("product", "description", "description"),
    ("product", "pain_point", "painPoint"),
    ("product", "solution", "solution"),
)


@dataclass(frozen=True)
class CompletionSettings:
    temperature: float
    max_output_tokens: int


GENERATION_SETTINGS = CompletionSettings(temperature=0.7, max_output_tokens=1000)
ANALYSIS_SETTINGS = CompletionSettings(temperature=0.3, max_output_tokens=500)


def missing_generation_fields(request: GenerateEmailRequest) -> list[str]:
    if request.is_legacy_prompt:
        return [] if (request.prompt or "").strip() else ["prompt"]

    missing = []
    for section_name, attr, label in REQUIRED_FIELDS:
        section = getattr(request, section_name)
        if section is None or getattr(section, attr) is None:
            missing.append(f"{section_name}.{label}")
    if request.is_regeneration and request.variant1 is None:
        missing.append("variant1")
    return missing


def validate_generation_request(request: GenerateEmailRequest) -> None:
    # Regeneration needs the structured fields; a prebuilt prompt has none.
    if request.is_legacy_prompt and request.is_regeneration:
        raise ValidationError("improvements cannot be combined with a prebuilt prompt")

    missing = missing_generation_fields(request)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class EmailService:
    def __init__(
        self,
        client: OpenAIResponsesClient,
        model_name: str = DEFAULT_MODEL_NAME,
        log_path: Path | None = None,
        prompt_debug: bool = False,
    ) -> None:
        self.client = client
        self.model_name = model_name
        self.log_path = log_path or DEFAULT_LOG_PATH
        self.prompt_debug = prompt_debug

    async def generate(self, request: GenerateEmailRequest) -> EmailDraftSet:
        validate_generation_request(request)

        if request.is_regeneration:
            event = "regenerate"
            messages = build_messages(REGENERATION_SYSTEM_PROMPT, build_regeneration_prompt(request))
            response_format = REGENERATION_SCHEMA
        elif request.is_legacy_prompt:
            event = "generate_legacy"
            messages = build_messages(GENERATION_SYSTEM_PROMPT, build_legacy_prompt(request.prompt or ""))
            response_format = GENERATION_SCHEMA
        else:
            event = "generate"
            messages = build_messages(GENERATION_SYSTEM_PROMPT, build_generation_prompt(request))
            response_format = GENERATION_SCHEMA

        content, log_record = await self._complete(
            event, messages, response_format, GENERATION_SETTINGS
        )
        try:
            raw = parse_json_content(content)
            if request.is_regeneration:
                drafts = EmailDraftSet(
                    improvements=request.improvements,
                    variant1=request.variant1 or "",
                    variant2=normalize_replacement(raw),
                )
            else:
                drafts = normalize_draft_set(raw)
        except MalformedResponseError as exc:
            self._log_error(log_record, "parse_response", exc)
            raise

        log_record["has_improvements"] = drafts.improvements is not None
        self._log_ok(log_record)
        return drafts

    async def analyze(self, email_content: str | None) -> EmailMetrics:
        if email_content is None or not email_content.strip():
            raise ValidationError("Missing required field: emailContent")

        messages = build_messages(ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt(email_content))
        content, log_record = await self._complete(
            "analyze", messages, ANALYSIS_SCHEMA, ANALYSIS_SETTINGS
        )
        try:
            metrics = normalize_metrics(parse_json_content(content))
        except MalformedResponseError as exc:
            self._log_error(log_record, "parse_response", exc)
            raise

        log_record["estimated_response_rate"] = metrics.estimated_response_rate
        self._log_ok(log_record)
        return metrics

    async def _complete(
        self,
        event: str,
        messages: list[dict[str, str]],
        response_format: dict[str, Any],
        settings: CompletionSettings,
    ) -> tuple[str, dict[str, Any]]:
        log_record: dict[str, Any] = {
            "ts": utc_now_iso(),
            "request_id": uuid.uuid4().hex,
            "event": event,
            "model_name": self.model_name,
            "temperature": settings.temperature,
            "_started": time.perf_counter(),
        }
        if self.prompt_debug:
            print(messages[-1]["content"])

        try:
            content = await self.client.complete(
                messages=messages,
                response_format=response_format,
                temperature=settings.temperature,
                max_output_tokens=settings.max_output_tokens,
            )
        except EmailServiceError as exc:
            self._log_error(log_record, "openai_call", exc)
            raise

        log_record["model_output_preview"] = content[:1200]
        return content, log_record

    def _log_ok(self, log_record: dict[str, Any]) -> None:
        log_record["status"] = "ok"
        self._write(log_record)

    def _log_error(self, log_record: dict[str, Any], stage: str, exc: EmailServiceError) -> None:
        error: dict[str, Any] = {"stage": stage, "type": type(exc).__name__, "msg": str(exc)}
        if isinstance(exc, MalformedResponseError):
            error["raw_content"] = exc.raw_content
        log_record["error"] = error
        log_record["status"] = "error"
        self._write(log_record)

    def _write(self, log_record: dict[str, Any]) -> None:
        started = log_record.pop("_started", None)
        if started is not None:
            log_record["latency_ms"] = int((time.perf_counter() - started) * 1000)
        append_ndjson(self.log_path, log_record)
