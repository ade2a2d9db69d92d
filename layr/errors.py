"""Error taxonomy shared by providers, the normalizer and the planner."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    API_KEY_MISSING = "api_key_missing"
    AI_SERVICE = "ai_service"
    UNSUPPORTED_PROVIDER = "unsupported_provider"


class LayrError(Exception):
    """Base error. ``kind`` lets callers branch without isinstance checks."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class APIKeyMissingError(LayrError):
    """No usable credential is configured for the selected provider."""

    kind = ErrorKind.API_KEY_MISSING

    def __init__(self, provider: str) -> None:
        super().__init__(
            f"API key for '{provider}' is missing or still set to the placeholder value"
        )
        self.provider = provider


class AIServiceError(LayrError):
    """The remote call failed: non-2xx, empty reply, bad JSON or transport error."""

    kind = ErrorKind.AI_SERVICE

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class UnsupportedProviderError(LayrError):
    """The requested provider identifier is not registered."""

    kind = ErrorKind.UNSUPPORTED_PROVIDER

    def __init__(self, provider_type: str) -> None:
        super().__init__(f"Unsupported AI provider: {provider_type}")
        self.provider_type = provider_type
