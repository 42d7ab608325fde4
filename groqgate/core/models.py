"""Transport models for the upstream chat-completions call."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, JsonValue

# 上游响应体不做解析，原样透传
UpstreamBody = Any


class ChatMessage(BaseModel):
    role: str
    content: JsonValue


class OutboundPayload(BaseModel):
    # caller-supplied values pass through untouched once they are truthy
    model: JsonValue
    messages: JsonValue
    temperature: int | float
    max_tokens: JsonValue
