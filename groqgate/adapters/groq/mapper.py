"""Inbound body -> upstream chat-completions payload."""

from __future__ import annotations

import math
from typing import Any

from groqgate.core.config import ProxyConfig
from groqgate.core.models import ChatMessage, OutboundPayload


def is_truthy(value: Any) -> bool:
    """Loose truthiness used by the request contract.

    Empty strings, zero, ``NaN``, ``False`` and ``None`` are falsy; every
    list and object is truthy, including empty ones.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def has_prompt(body: Any) -> bool:
    if not is_truthy(body) or not isinstance(body, dict):
        return False
    return is_truthy(body.get("prompt"))


def to_outbound_payload(body: dict[str, Any], config: ProxyConfig) -> OutboundPayload:
    model = body.get("model")
    messages = body.get("messages")
    temperature = body.get("temperature")
    max_tokens = body.get("max_tokens")

    if not is_truthy(messages):
        messages = [ChatMessage(role="user", content=body.get("prompt")).model_dump()]

    return OutboundPayload(
        model=model if is_truthy(model) else config.default_model,
        messages=messages,
        temperature=temperature if is_number(temperature) else config.default_temperature,
        max_tokens=max_tokens if is_truthy(max_tokens) else config.default_max_tokens,
    )
