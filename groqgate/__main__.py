"""Run the proxy with uvicorn: ``python -m groqgate``."""

from __future__ import annotations

import argparse

import uvicorn

from groqgate.config.settings import settings


def main() -> None:
    parser = argparse.ArgumentParser(prog="groqgate", description="Groq chat-completions proxy")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args()
    uvicorn.run(
        "groqgate.core.gateway:app",
        host=args.host,
        port=args.port,
        log_level=str(args.log_level).lower(),
    )


if __name__ == "__main__":
    main()
