"""Masking for traced requests.

Only used when ``HooksConfig.trace_requests`` is on: headers are masked by
name, JSON bodies by key, and the rendered body is cut to a log-friendly
length.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie", "x-api-key", "x-auth-token"}
)

# Body keys are compared after lowercasing and dropping "-" and "_".
_SENSITIVE_BODY_KEYS: frozenset[str] = frozenset(
    {"password", "secret", "token", "accesstoken", "refreshtoken", "apikey", "clientsecret"}
)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy *headers* with credential-bearing values masked (names match case-insensitively)."""
    return {name: REDACTED if name.lower() in _SENSITIVE_HEADERS else value for name, value in headers.items()}


def _mask_body(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: REDACTED
            if str(key).lower().replace("-", "").replace("_", "") in _SENSITIVE_BODY_KEYS
            else _mask_body(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_mask_body(item) for item in value]
    return value


def redact_body(body: Any, *, max_length: int = 512) -> str:
    """Render a request or response body for a DEBUG line.

    JSON-like bodies are masked by key and re-encoded compactly; strings and
    bytes are shown as-is (bytes by size only). The result is truncated to
    *max_length* characters.
    """
    if body is None:
        return "-"
    if isinstance(body, (bytes, bytearray)):
        return f"<bytes:{len(body)}b>"
    if isinstance(body, str):
        rendered = body
    else:
        rendered = json.dumps(_mask_body(body), separators=(",", ":"), default=repr)
    if len(rendered) > max_length:
        return f"{rendered[:max_length]}…<truncated>"
    return rendered
