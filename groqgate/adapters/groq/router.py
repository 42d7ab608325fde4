"""Groq proxy route."""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any
from urllib.parse import parse_qs

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.types import Receive, Scope, Send

from groqgate.adapters.groq.mapper import has_prompt, to_outbound_payload
from groqgate.adapters.groq.upstream import _forward_json
from groqgate.core.config import ProxyConfig
from groqgate.core.errors import RequestBodyDecodeError
from groqgate.util.logger import logger
from groqgate.util.masking import redact_headers


router = APIRouter()

_DEBUG_REQUEST_BODY_MAX_CHARS = 4000

METHOD_NOT_ALLOWED = "Method Not Allowed"
MISSING_API_KEY = "Server misconfiguration: API key not found"
MISSING_PROMPT = "Missing prompt in request body"
UPSTREAM_ERROR = "Upstream Groq API error"
INTERNAL_ERROR = "Internal server error"


def get_proxy_config(request: Request) -> ProxyConfig:
    return request.app.state.proxy_config


def get_upstream_client(request: Request) -> httpx.AsyncClient | None:
    # 仅在 lifespan 运行期间存在
    return getattr(request.app.state, "upstream_client", None)


def _error_response(status_code: int, error: str, headers: dict[str, str] | None = None, **extra: Any) -> JSONResponse:
    content: dict[str, Any] = {"error": error, **extra}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def _decode_form(text: str) -> dict[str, Any]:
    # 重复字段保留为列表，单值字段还原为字符串
    parsed = parse_qs(text, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


async def _read_body(request: Request) -> Any:
    """Decode the inbound body the way a serverless runtime hands it over.

    Empty bodies become ``None``, JSON and urlencoded form content types are
    decoded into objects, anything else stays text.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    text = raw.decode("utf-8", errors="replace")
    media_type = _media_type(request)
    if media_type == "application/x-www-form-urlencoded":
        return _decode_form(text)
    if media_type != "application/json" and not media_type.endswith("+json"):
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise RequestBodyDecodeError(f"Invalid JSON: {exc}") from exc


def _log_request_if_debug(request: Request, request_id: str, body: Any) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    try:
        body_str = json.dumps(body, ensure_ascii=False)
    except (TypeError, ValueError):
        body_str = str(body)
    if len(body_str) > _DEBUG_REQUEST_BODY_MAX_CHARS:
        body_str = f"{body_str[:_DEBUG_REQUEST_BODY_MAX_CHARS]} ... [truncated, total {len(body_str)} chars]"
    logger.debug(
        "incoming request request_id=%s method=%s path=%s headers=%s body=%s",
        request_id,
        request.method,
        request.url.path,
        redact_headers(request.headers),
        body_str,
    )


async def handle_proxy_request(
    request: Request,
    config: ProxyConfig,
    client: httpx.AsyncClient | None = None,
) -> JSONResponse:
    request_id = f"credit-{uuid.uuid4().hex}"

    if request.method.upper() != "POST":
        logger.info("reject method request_id=%s method=%s", request_id, request.method)
        return _error_response(405, METHOD_NOT_ALLOWED, headers={"Allow": "POST"})

    if not config.has_credential:
        logger.error("upstream api key not configured request_id=%s", request_id)
        return _error_response(500, MISSING_API_KEY)

    try:
        body = await _read_body(request)
        _log_request_if_debug(request, request_id, body)
        if not has_prompt(body):
            logger.info("reject missing prompt request_id=%s", request_id)
            return _error_response(400, MISSING_PROMPT)

        payload = to_outbound_payload(body, config)
        status_code, upstream_body = await _forward_json(payload, config, client=client)

        if not 200 <= status_code < 300:
            logger.error(
                "upstream api error request_id=%s status=%s body=%s",
                request_id,
                status_code,
                upstream_body,
            )
            return _error_response(502, UPSTREAM_ERROR, details=upstream_body)

        logger.info("proxy completed request_id=%s model=%s", request_id, payload.model)
        return JSONResponse(status_code=200, content=upstream_body)
    except Exception as exc:
        logger.exception("proxy error request_id=%s error=%s", request_id, exc)
        return _error_response(500, INTERNAL_ERROR, details=str(exc))


class ProxyEndpoint:
    """ASGI endpoint for every HTTP method; non-POST is rejected by the handler."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        response = await handle_proxy_request(
            request,
            get_proxy_config(request),
            client=get_upstream_client(request),
        )
        await response(scope, receive, send)


# 非函数 endpoint 且不限定 methods：所有方法都进入 handler，由其返回 405
router.add_route("/credit", ProxyEndpoint(), include_in_schema=False)
