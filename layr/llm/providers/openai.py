"""OpenAI provider."""

from __future__ import annotations

import httpx
import openai

from layr.errors import AIServiceError, APIKeyMissingError
from layr.llm.base import (
    BaseProvider,
    GenerateOptions,
    ProviderConfig,
    has_usable_key,
    status_error_detail,
)
from layr.llm.prompts import PLAN_JSON_SYSTEM_PROMPT


class OpenAIProvider(BaseProvider):
    """Chat Completions through the OpenAI SDK."""

    name = "OpenAI"
    type = "openai"
    models = ("gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-4", "gpt-3.5-turbo")

    def __init__(
        self, config: ProviderConfig | None = None, http_client: httpx.AsyncClient | None = None
    ) -> None:
        super().__init__(config)
        self._http_client = http_client
        self._client: openai.AsyncOpenAI | None = None
        if has_usable_key(self.config.api_key):
            self._client = self._make_client(self.config.api_key)

    def _make_client(self, api_key: str) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=api_key,
            organization=self.config.organization,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=0,
            http_client=self._http_client,
        )

    async def generate_plan(self, prompt: str, options: GenerateOptions | None = None) -> str:
        if self._client is None:
            raise APIKeyMissingError(self.type)

        try:
            response = await self._client.chat.completions.create(
                model=self.resolve_model(options),
                messages=[
                    {"role": "system", "content": PLAN_JSON_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.config.temperature,
                top_p=0.95,
                max_tokens=self.resolve_max_tokens(options),
            )
        except openai.APIStatusError as e:
            raise AIServiceError(f"OpenAI API error: {e.status_code}. {status_error_detail(e)}", e) from e
        except Exception as e:
            raise AIServiceError(f"Failed to generate plan with OpenAI: {e}", e) from e

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            raise AIServiceError("Empty response from OpenAI API")
        return text

    async def validate_api_key(self, api_key: str) -> bool:
        if not has_usable_key(api_key):
            return False
        client = self._make_client(api_key)
        try:
            await client.models.list()
        except openai.OpenAIError:
            return False
        finally:
            if self._http_client is None:
                await client.close()
        return True
