"""Immutable proxy configuration handed to the request handler."""

from __future__ import annotations

from dataclasses import dataclass

from groqgate.config.settings import Settings


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    """Configuration resolved once at startup.

    ``api_key`` is ``None`` when no credential was configured; the handler
    answers every POST with a misconfiguration error in that case instead of
    refusing to start.
    """

    api_key: str | None
    upstream_url: str = "https://api.groq.com/openai/v1/chat/completions"
    default_model: str = "llama-3.3-70b-versatile"
    default_temperature: float = 0.7
    default_max_tokens: int = 1000
    timeout_seconds: float = 60.0
    max_connections: int = 100
    max_keepalive_connections: int = 20

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_settings(cls, source: Settings) -> "ProxyConfig":
        api_key = (source.groq_api_key or "").strip() or None
        return cls(
            api_key=api_key,
            upstream_url=source.upstream_url.strip(),
            default_model=source.default_model,
            default_temperature=source.default_temperature,
            default_max_tokens=source.default_max_tokens,
            timeout_seconds=float(source.upstream_timeout_seconds),
            max_connections=max(1, int(source.upstream_max_connections)),
            max_keepalive_connections=max(0, int(source.upstream_max_keepalive_connections)),
        )
