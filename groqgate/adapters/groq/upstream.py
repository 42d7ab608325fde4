"""
上游 HTTP 转发：连接池构造、鉴权头构造与单次 POST。从 router 拆出，便于单测。
"""

from __future__ import annotations

import json

import httpx

from groqgate.core.config import ProxyConfig
from groqgate.core.errors import UpstreamDecodeError, UpstreamUnreachableError
from groqgate.core.models import OutboundPayload, UpstreamBody
from groqgate.util.logger import logger
from groqgate.util.masking import mask_for_log


def _upstream_http_limits(config: ProxyConfig) -> httpx.Limits:
    return httpx.Limits(
        max_connections=config.max_connections,
        max_keepalive_connections=config.max_keepalive_connections,
    )


def _upstream_http_timeout(config: ProxyConfig) -> httpx.Timeout:
    timeout = float(config.timeout_seconds)
    return httpx.Timeout(connect=timeout, read=timeout, write=timeout, pool=timeout)


def build_upstream_client(config: ProxyConfig) -> httpx.AsyncClient:
    """Connection pool sized and timed by *config*; the app owns and closes it."""
    return httpx.AsyncClient(
        timeout=_upstream_http_timeout(config),
        limits=_upstream_http_limits(config),
    )


def _build_upstream_headers(api_key: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


def _decode_upstream_json(body: bytes) -> UpstreamBody:
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise UpstreamDecodeError(f"upstream_invalid_json: {exc}") from exc


async def _post(
    http_client: httpx.AsyncClient,
    url: str,
    body: bytes,
    api_key: str,
) -> tuple[int, UpstreamBody]:
    try:
        response = await http_client.post(url=url, content=body, headers=_build_upstream_headers(api_key))
    except httpx.HTTPError as exc:
        detail = (str(exc) or "").strip() or exc.__class__.__name__
        logger.warning("forward_json http_error url=%s error=%s", url, detail)
        raise UpstreamUnreachableError(f"upstream_unreachable: {detail}") from exc
    logger.debug("forward_json done url=%s status=%s", url, response.status_code)
    return response.status_code, _decode_upstream_json(response.content)


async def _forward_json(
    payload: OutboundPayload,
    config: ProxyConfig,
    client: httpx.AsyncClient | None = None,
) -> tuple[int, UpstreamBody]:
    """POST *payload* upstream and return ``(status_code, decoded_body)``.

    Uses *client* when given, otherwise a one-off client built from *config*.
    The body is decoded before the caller looks at the status, so a non-JSON
    error page surfaces as :class:`UpstreamDecodeError`.
    """
    if not config.api_key:
        raise ValueError("api_key is required to call upstream")
    body = json.dumps(payload.model_dump(mode="json"), ensure_ascii=False).encode("utf-8")
    url = config.upstream_url
    logger.debug(
        "forward_json start url=%s key=%s payload_bytes=%d",
        url,
        mask_for_log(config.api_key),
        len(body),
    )
    if client is not None:
        return await _post(client, url, body, config.api_key)
    async with build_upstream_client(config) as one_off_client:
        return await _post(one_off_client, url, body, config.api_key)
