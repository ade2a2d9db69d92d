"""AI provider protocol and per-provider configuration."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field

ProviderType = Literal["gemini", "openai", "claude", "groq"]
OutputFormat = Literal["json", "markdown"]

# Value shipped in sample configs; treated the same as no key at all.
PLACEHOLDER_API_KEY = "your_api_key_here"


class ProviderConfig(BaseModel):
    """Construction-time settings for one provider instance.

    Frozen so a registry can reuse one instance per distinct configuration.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: str = ""
    model: str | None = None
    max_tokens: int = Field(default=4000, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    organization: str | None = None
    base_url: str | None = None
    relay_url: str | None = None
    timeout: float = Field(default=120.0, gt=0)


class GenerateOptions(BaseModel):
    """Per-call overrides of the configured model and token budget."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    model: str | None = None
    max_tokens: int | None = Field(default=None, gt=0)


def has_usable_key(api_key: str | None) -> bool:
    return bool(api_key and api_key.strip() and api_key.strip() != PLACEHOLDER_API_KEY)


@runtime_checkable
class AIProvider(Protocol):
    """Protocol for plan-generation back-ends."""

    name: str
    type: ProviderType
    output_format: OutputFormat

    async def generate_plan(self, prompt: str, options: GenerateOptions | None = None) -> str: ...

    async def validate_api_key(self, api_key: str) -> bool: ...

    def get_supported_models(self) -> list[str]: ...

    async def is_available(self) -> bool: ...

    def resolve_model(self, options: GenerateOptions | None = None) -> str: ...


class BaseProvider:
    """Shared plumbing for the concrete providers."""

    name: str
    type: ProviderType
    output_format: OutputFormat = "json"
    models: tuple[str, ...] = ()

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self.config = config or ProviderConfig()

    def get_supported_models(self) -> list[str]:
        """Hard-coded model list; the first entry is the recommended default."""
        return list(self.models)

    def resolve_model(self, options: GenerateOptions | None = None) -> str:
        if options and options.model:
            return options.model
        return self.config.model or self.models[0]

    def resolve_max_tokens(self, options: GenerateOptions | None = None) -> int:
        if options and options.max_tokens:
            return options.max_tokens
        return self.config.max_tokens

    async def is_available(self) -> bool:
        return has_usable_key(self.config.api_key)


@asynccontextmanager
async def http_session(
    client: httpx.AsyncClient | None, timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client as-is, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


def response_error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the back-end's own error text."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return response.text.strip()


def status_error_detail(error: Exception) -> str:
    """The back-end's own message from an SDK status error, else the SDK's text."""
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        # Anthropic keeps the whole payload, OpenAI only its "error" member.
        if isinstance(body.get("error"), dict):
            body = body["error"]
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return str(getattr(error, "message", error))
