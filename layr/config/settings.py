"""Application settings via Pydantic BaseSettings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from layr.llm.base import ProviderConfig, ProviderType, has_usable_key

# Auto-detection order when no provider is configured explicitly.
DIRECT_PROVIDERS: tuple[ProviderType, ...] = ("gemini", "openai", "claude")


class LayrSettings(BaseSettings):
    """Layr configuration from environment variables and .env files.

    No key is required: without one, plans come from the built-in templates.
    """

    model_config = {"env_prefix": "LAYR_", "env_file": ".env", "extra": "ignore"}

    provider: Literal["gemini", "openai", "claude", "groq"] | None = None
    model: str | None = None
    max_tokens: int | None = Field(default=None, gt=0)
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    openai_organization: str | None = None
    claude_api_key: str | None = None
    proxy_url: str | None = None
    runs_dir: Path = Path(".layr/runs")

    @model_validator(mode="after")
    def fallback_api_keys(self) -> LayrSettings:
        # Also accept the vendors' standard env vars without the LAYR_ prefix
        if not self.gemini_api_key:
            self.gemini_api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not self.openai_api_key:
            self.openai_api_key = os.environ.get("OPENAI_API_KEY")
        if not self.claude_api_key:
            self.claude_api_key = os.environ.get("ANTHROPIC_API_KEY")
        return self

    def api_key_for(self, provider_type: str) -> str | None:
        return {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
            "claude": self.claude_api_key,
        }.get(provider_type)

    def provider_config(self, provider_type: str, model: str | None = None) -> ProviderConfig:
        """Build the frozen config for one provider from these settings."""
        values: dict[str, object] = {"api_key": self.api_key_for(provider_type) or ""}
        if model or self.model:
            values["model"] = model or self.model
        if self.max_tokens:
            values["max_tokens"] = self.max_tokens
        if provider_type == "openai" and self.openai_organization:
            values["organization"] = self.openai_organization
        if provider_type == "groq":
            values["relay_url"] = self.proxy_url
        return ProviderConfig(**values)  # type: ignore[arg-type]

    def default_provider(self) -> str | None:
        """The configured provider, else the first one with usable credentials."""
        if self.provider:
            return self.provider
        for provider_type in DIRECT_PROVIDERS:
            if has_usable_key(self.api_key_for(provider_type)):
                return provider_type
        if self.proxy_url:
            return "groq"
        return None

    def secrets(self) -> dict[str, str]:
        """Credential values keyed by setting name, for log redaction."""
        candidates = {
            "gemini_api_key": self.gemini_api_key,
            "openai_api_key": self.openai_api_key,
            "claude_api_key": self.claude_api_key,
        }
        return {name: value for name, value in candidates.items() if value}


def load_settings(**overrides: object) -> LayrSettings:
    """Load settings with optional overrides (useful for CLI args)."""
    return LayrSettings(**{k: v for k, v in overrides.items() if v is not None})  # type: ignore[arg-type]
