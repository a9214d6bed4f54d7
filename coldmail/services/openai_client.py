from typing import Any

import httpx

from ..config import DEFAULT_MODEL_NAME, OPENAI_API_URL
from ..errors import RemoteServiceError
from .response_parsing import extract_response_text


class OpenAIResponsesClient:
    """Single-shot calls to the OpenAI Responses API.

    One instance is built per application and handed to the service layer;
    each call opens its own ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = OPENAI_API_URL,
        model_name: str = DEFAULT_MODEL_NAME,
        timeout_seconds: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def complete(
        self,
        *,
        messages: list[dict[str, str]],
        response_format: dict[str, Any],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        if not self.api_key:
            raise RemoteServiceError("OPENAI_API_KEY is not set")

        system_msg, user_msg = _split_messages(messages)
        request_body = {
            "model": self.model_name,
            "input": [{"role": "user", "content": user_msg}],
            "instructions": system_msg,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
            "text": {"format": response_format},
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=request_body,
                )
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"{type(exc).__name__}: {exc}") from exc

        if response.status_code >= 400:
            raise RemoteServiceError(
                _provider_error_message(response), provider_status=response.status_code
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteServiceError("Completion service returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise RemoteServiceError("Unexpected completion payload")
        try:
            content, refusal = extract_response_text(data)
        except (AttributeError, TypeError) as exc:
            raise RemoteServiceError("Unexpected completion payload") from exc
        if refusal:
            raise RemoteServiceError(f"Model refused: {refusal}")
        if not content:
            output_text = data.get("output_text")
            content = output_text if isinstance(output_text, str) else ""
        if not content.strip():
            raise RemoteServiceError("Empty response from model")
        return content


def _provider_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:500] or f"HTTP {response.status_code}"
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text[:500]


def _split_messages(messages: list[dict[str, str]]) -> tuple[str, str]:
    system_msg = ""
    user_msg = ""
    for msg in messages:
        role = msg.get("role")
        if role == "system":
            system_msg = msg.get("content", "")
        elif role == "user":
            user_msg = msg.get("content", "")
    return system_msg, user_msg

