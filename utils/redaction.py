"""Scrubs Meta access tokens out of anything headed for a log sink.

Two layers:
  * pattern based - ``access_token=...`` query/form fragments and
    ``Bearer ...`` header values are masked wherever they appear;
  * value based - the credential provider registers the raw token it hands
    out, and any literal occurrence of it is masked too (error bodies from
    the Graph API sometimes echo the request URL).
"""

import re
from typing import Any, Iterable

REDACTED = "[REDACTED]"

_TOKEN_PATTERNS = (
    re.compile(r"(access_token[\"']?\s*[=:]\s*[\"']?)[^&\s\"',}]+", re.IGNORECASE),
    re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+", re.IGNORECASE),
)

_known_secrets: set[str] = set()


def register_secret(secret: str | None) -> None:
    if secret:
        _known_secrets.add(secret)


def forget_secret(secret: str | None) -> None:
    _known_secrets.discard(secret)


def redact(text: str, secrets: Iterable[str] = ()) -> str:
    if not text:
        return text
    for secret in (*secrets, *_known_secrets):
        if secret:
            text = text.replace(secret, REDACTED)
    for pattern in _TOKEN_PATTERNS:
        text = pattern.sub(lambda m: f"{m.group(1)}{REDACTED}", text)
    return text


def redact_value(value: Any, secrets: Iterable[str] = ()) -> Any:
    """Recursively redact strings inside dicts, lists and tuples."""
    secrets = tuple(secrets)
    if isinstance(value, str):
        return redact(value, secrets)
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() == "access_token" else redact_value(item, secrets)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_value(item, secrets) for item in value]
    if isinstance(value, tuple):
        return tuple(redact_value(item, secrets) for item in value)
    return value


def redact_event_dict(logger, method_name, event_dict):
    """structlog processor: runs before rendering so no sink sees a token."""
    return redact_value(event_dict)
