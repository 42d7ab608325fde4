"""Unified logger for the whole project."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from groqgate.config.settings import settings


MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 10


def _normalize_level(raw: str) -> int:
    candidate = str(raw or "INFO").strip().upper()
    return {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }.get(candidate, logging.INFO)


def _build_logger() -> logging.Logger:
    configured_logger = logging.getLogger("groqgate")
    if configured_logger.handlers:
        return configured_logger

    resolved_level = _normalize_level(settings.log_level)
    configured_logger.setLevel(resolved_level)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved_level)
    stream_handler.setFormatter(formatter)
    configured_logger.addHandler(stream_handler)

    log_file = settings.log_file.strip()
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            rotating_handler = RotatingFileHandler(
                log_path,
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
            rotating_handler.setLevel(resolved_level)
            rotating_handler.setFormatter(formatter)
            configured_logger.addHandler(rotating_handler)
        except OSError:
            # 日志目录不可写时仅使用 stderr
            configured_logger.warning("log file unavailable, stderr only path=%s", log_file)

    configured_logger.propagate = False
    return configured_logger


logger = _build_logger()

