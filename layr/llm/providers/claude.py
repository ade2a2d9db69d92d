"""Anthropic Claude provider."""

from __future__ import annotations

import anthropic
import httpx

from layr.errors import AIServiceError, APIKeyMissingError
from layr.llm.base import (
    BaseProvider,
    GenerateOptions,
    ProviderConfig,
    has_usable_key,
    status_error_detail,
)
from layr.llm.prompts import PLAN_JSON_SYSTEM_PROMPT

# Cheapest model, used only for the key liveness probe.
VALIDATION_MODEL = "claude-3-haiku-20240307"


class ClaudeProvider(BaseProvider):
    """Messages API through the Anthropic SDK."""

    name = "Anthropic Claude"
    type = "claude"
    models = (
        "claude-sonnet-4-20250514",
        "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229",
        "claude-3-haiku-20240307",
    )

    def __init__(
        self, config: ProviderConfig | None = None, http_client: httpx.AsyncClient | None = None
    ) -> None:
        super().__init__(config)
        self._http_client = http_client
        self._client: anthropic.AsyncAnthropic | None = None
        if has_usable_key(self.config.api_key):
            self._client = self._make_client(self.config.api_key)

    def _make_client(self, api_key: str) -> anthropic.AsyncAnthropic:
        kwargs = {}
        if self.config.base_url:
            kwargs["base_url"] = self.config.base_url
        if self._http_client is not None:
            kwargs["http_client"] = self._http_client
        return anthropic.AsyncAnthropic(
            api_key=api_key, timeout=self.config.timeout, max_retries=0, **kwargs
        )

    async def generate_plan(self, prompt: str, options: GenerateOptions | None = None) -> str:
        if self._client is None:
            raise APIKeyMissingError(self.type)

        try:
            response = await self._client.messages.create(
                model=self.resolve_model(options),
                max_tokens=self.resolve_max_tokens(options),
                temperature=self.config.temperature,
                system=PLAN_JSON_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            raise AIServiceError(f"Claude API error: {e.status_code}. {status_error_detail(e)}", e) from e
        except Exception as e:
            raise AIServiceError(f"Failed to generate plan with Claude: {e}", e) from e

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text.strip():
            raise AIServiceError("Empty response from Claude API")
        return text

    async def validate_api_key(self, api_key: str) -> bool:
        # No dedicated endpoint; a tiny request is the cheapest probe.
        if not has_usable_key(api_key):
            return False
        client = self._make_client(api_key)
        try:
            await client.messages.create(
                model=VALIDATION_MODEL,
                max_tokens=10,
                messages=[{"role": "user", "content": "Hi"}],
            )
        except anthropic.AnthropicError:
            return False
        finally:
            if self._http_client is None:
                await client.close()
        return True
