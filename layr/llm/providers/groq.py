"""Groq provider, reached through a relay that holds the real API key.

The relay accepts ``{prompt: {systemPrompt, userPrompt}, model, maxTokens}``
and answers ``{success: true, content, usage?}`` or ``{error, details?, message?}``.
No caller credential is ever sent.
"""

from __future__ import annotations

import httpx

from layr.errors import AIServiceError
from layr.llm.base import BaseProvider, GenerateOptions, ProviderConfig, http_session
from layr.llm.prompts import PLAN_MARKDOWN_SYSTEM_PROMPT

# Left in place by an undeployed build; means "no relay".
RELAY_URL_SENTINEL = "YOUR_VERCEL_URL_HERE"
RELAY_MAX_TOKENS = 8000

NOT_CONFIGURED_MESSAGE = (
    "Layr AI backend is not configured yet. "
    "The API relay has not been deployed (set LAYR_PROXY_URL to its URL)."
)


class GroqProvider(BaseProvider):
    """Relay-backed provider; replies are finished Markdown documents."""

    name = "Groq"
    type = "groq"
    output_format = "markdown"
    models = (
        "llama-3.3-70b-versatile",
        "llama-3.1-70b-versatile",
        "llama-3.1-8b-instant",
        "mixtral-8x7b-32768",
        "gemma2-9b-it",
    )

    def __init__(
        self, config: ProviderConfig | None = None, http_client: httpx.AsyncClient | None = None
    ) -> None:
        super().__init__(config)
        self._http_client = http_client
        self.relay_url = (self.config.relay_url or "").strip()

    @property
    def relay_configured(self) -> bool:
        return bool(self.relay_url) and self.relay_url != RELAY_URL_SENTINEL

    def resolve_max_tokens(self, options: GenerateOptions | None = None) -> int:
        if options and options.max_tokens:
            return options.max_tokens
        if "max_tokens" in self.config.model_fields_set:
            return self.config.max_tokens
        return RELAY_MAX_TOKENS

    async def generate_plan(self, prompt: str, options: GenerateOptions | None = None) -> str:
        if not self.relay_configured:
            raise AIServiceError(NOT_CONFIGURED_MESSAGE)

        payload = {
            "prompt": {"systemPrompt": PLAN_MARKDOWN_SYSTEM_PROMPT, "userPrompt": prompt},
            "model": self.resolve_model(options),
            "maxTokens": self.resolve_max_tokens(options),
        }

        try:
            async with http_session(self._http_client, self.config.timeout) as client:
                response = await client.post(self.relay_url, json=payload)
            if not response.is_success:
                raise AIServiceError(
                    f"API request failed ({response.status_code}): {response.text.strip()}"
                )
            data = response.json()
        except AIServiceError:
            raise
        except Exception as e:
            raise AIServiceError(f"Failed to generate plan: {e}", e) from e

        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise AIServiceError("API returned empty response")
        return content

    async def validate_api_key(self, api_key: str) -> bool:
        # The caller's key never reaches the relay; only its configuration can be checked.
        return self.relay_configured

    async def is_available(self) -> bool:
        return self.relay_configured
