"""Secret redaction for event logs and error output."""

from __future__ import annotations

import re
from typing import Any

AUTO = "[REDACTED:auto]"

# Key-ish assignments and auth headers: keep the name, drop the value.
_NAMED_VALUES: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"""(?ix)
        (\b(?:api[_-]?key|secret|token|password)\b\s*[:=]\s*)
        (?:"[^"\n]*"|'[^'\n]*'|[^\s,;]+)
        """
    ),
    re.compile(r"(?i)(\b(?:authorization|x-api-key|x-goog-api-key)\b\s*[:=]\s*)(?:bearer\s+)?[^\s,;]+"),
    # Gemini accepts the key as a query parameter too.
    re.compile(r"([?&]key=)[^&\s]+"),
)

# Bare provider key formats. Anthropic's prefix must be tried before OpenAI's.
_KEY_FORMATS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bsk-ant-[\w\-]{20,}"),
    re.compile(r"\bsk-(?:proj-)?[\w\-]{20,}"),
    re.compile(r"\bgsk_[A-Za-z0-9]{20,}\b"),
    re.compile(r"\bAIza[\w\-]{35}\b"),
)


def redact(text: str, secrets: dict[str, str]) -> str:
    """Replace each known secret value with ``[REDACTED:<name>]``."""
    # Longest first, so a secret containing another is replaced whole.
    for name, value in sorted(secrets.items(), key=lambda item: len(item[1]), reverse=True):
        if value:
            text = text.replace(value, f"[REDACTED:{name}]")
    return text


def redact_patterns(text: str) -> str:
    """Redact credentials recognisable by shape alone."""
    for pattern in _NAMED_VALUES:
        text = pattern.sub(rf"\1{AUTO}", text)
    for pattern in _KEY_FORMATS:
        text = pattern.sub(AUTO, text)
    return text


def redact_text(text: str, secrets: dict[str, str]) -> str:
    return redact_patterns(redact(text, secrets))


def redact_structured(data: Any, secrets: dict[str, str]) -> Any:
    """Apply :func:`redact_text` to every string inside nested containers."""
    if isinstance(data, str):
        return redact_text(data, secrets)
    if isinstance(data, dict):
        return {key: redact_structured(value, secrets) for key, value in data.items()}
    if isinstance(data, list | tuple):
        return type(data)(redact_structured(item, secrets) for item in data)
    return data
