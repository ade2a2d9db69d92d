"""Google Gemini provider, over the Generative Language REST API."""

from __future__ import annotations

from typing import Any

import httpx

from layr.errors import AIServiceError, APIKeyMissingError
from layr.llm.base import (
    BaseProvider,
    GenerateOptions,
    ProviderConfig,
    has_usable_key,
    http_session,
    response_error_message,
)
from layr.llm.prompts import PLAN_JSON_SYSTEM_PROMPT

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"

_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class GeminiProvider(BaseProvider):
    """LLM provider for Google Gemini models."""

    name = "Google Gemini"
    type = "gemini"
    models = ("gemini-1.5-flash", "gemini-1.5-pro", "gemini-pro")

    def __init__(
        self, config: ProviderConfig | None = None, http_client: httpx.AsyncClient | None = None
    ) -> None:
        super().__init__(config)
        self._http_client = http_client
        self.base_url = (self.config.base_url or DEFAULT_BASE_URL).rstrip("/")

    async def generate_plan(self, prompt: str, options: GenerateOptions | None = None) -> str:
        if not has_usable_key(self.config.api_key):
            raise APIKeyMissingError(self.type)

        url = f"{self.base_url}/v1beta/models/{self.resolve_model(options)}:generateContent"
        body = {
            "systemInstruction": {"parts": [{"text": PLAN_JSON_SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self.resolve_max_tokens(options),
            },
            "safetySettings": [
                {"category": category, "threshold": "BLOCK_NONE"} for category in _SAFETY_CATEGORIES
            ],
        }

        try:
            async with http_session(self._http_client, self.config.timeout) as client:
                response = await client.post(url, json=body, headers=self._headers(self.config.api_key))
            if response.status_code >= 400:
                raise AIServiceError(
                    f"Gemini API error: {response.status_code}. {response_error_message(response)}"
                )
            text = _candidate_text(response.json())
        except AIServiceError:
            raise
        except Exception as e:
            raise AIServiceError(f"Failed to generate plan with Gemini: {e}", e) from e

        if not text.strip():
            raise AIServiceError("Empty response from Gemini API")
        return text

    async def validate_api_key(self, api_key: str) -> bool:
        if not has_usable_key(api_key):
            return False
        try:
            async with http_session(self._http_client, self.config.timeout) as client:
                response = await client.get(
                    f"{self.base_url}/v1beta/models", headers=self._headers(api_key)
                )
        except httpx.HTTPError:
            return False
        return response.is_success

    @staticmethod
    def _headers(api_key: str) -> dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": api_key.strip()}


def _candidate_text(data: Any) -> str:
    """Concatenate the text parts of the first candidate, tolerating odd shapes."""
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    return "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
