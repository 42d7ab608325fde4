"""FastAPI app entry."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from groqgate.adapters.groq.router import router as groq_router
from groqgate.adapters.groq.upstream import build_upstream_client
from groqgate.config.settings import Settings, settings
from groqgate.core.config import ProxyConfig
from groqgate.util.logger import logger


def create_app(config: ProxyConfig | None = None, app_settings: Settings | None = None) -> FastAPI:
    """Build the ASGI app with *config* bound to ``app.state.proxy_config``.

    The upstream connection pool is created from the same config when the
    app starts and closed when it stops (``app.state.upstream_client``).

    When *config* is omitted it is resolved from *app_settings* (or the
    process-wide settings) exactly once, here.
    """
    source = app_settings or settings
    proxy_config = config or ProxyConfig.from_settings(source)

    @asynccontextmanager
    async def lifespan(app_: FastAPI) -> AsyncIterator[None]:
        if not proxy_config.has_credential:
            logger.warning("GROQ_API_KEY not set; proxy requests will fail with 500")
        logger.info("groqgate started upstream=%s", proxy_config.upstream_url)
        app_.state.upstream_client = build_upstream_client(proxy_config)
        try:
            yield
        finally:
            await app_.state.upstream_client.aclose()
            app_.state.upstream_client = None
            logger.info("groqgate stopped")

    application = FastAPI(title=source.app_name, lifespan=lifespan)
    application.state.proxy_config = proxy_config
    application.include_router(groq_router, prefix="/api")

    @application.get("/health")
    def health() -> dict:
        logger.debug("health check")
        return {"status": "ok"}

    return application


app = create_app()
