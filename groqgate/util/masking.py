"""Value masking for secrets that appear in log lines."""

from __future__ import annotations

import re
from typing import Mapping


_SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie"})


def mask_for_log(value: str | None) -> str:
    """Return a partially-masked version of *value* safe for log output.

    Rules:
    - Preserve first 4 chars + last 2 chars for values >= 12 chars.
    - Shorter values get progressively fewer visible chars.
    - Whitespace is collapsed before masking.
    """
    normalized = re.sub(r"\s+", " ", value or "").strip()
    length = len(normalized)
    if length <= 0:
        return ""
    if length == 1:
        return "*"
    if length <= 4:
        return f"{normalized[:1]}{'*' * (length - 2)}{normalized[-1:]}"

    head = 4 if length >= 12 else 2
    tail = 2
    if head + tail >= length:
        head, tail = 1, 1
    return f"{normalized[:head]}{'*' * (length - head - tail)}{normalized[-tail:]}"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        lowered = key.lower()
        if lowered in _SENSITIVE_HEADERS or "key" in lowered or "secret" in lowered or "token" in lowered:
            redacted[key] = "***"
        else:
            redacted[key] = value
    return redacted
