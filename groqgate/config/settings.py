"""Runtime settings."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GROQGATE_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "GroqGate"
    log_level: str = "info"
    # 为空时只输出到 stderr
    log_file: str = ""
    host: str = "127.0.0.1"
    port: int = 18080

    groq_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GROQ_API_KEY", "GROQGATE_GROQ_API_KEY"),
    )
    upstream_url: str = "https://api.groq.com/openai/v1/chat/completions"
    upstream_timeout_seconds: float = Field(default=60.0, gt=0.0)
    upstream_max_connections: int = 100
    upstream_max_keepalive_connections: int = 20

    default_model: str = "llama-3.3-70b-versatile"
    default_temperature: float = 0.7
    default_max_tokens: int = 1000


settings = Settings()
