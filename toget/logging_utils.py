"""Structured logging helpers for toget."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

DEFAULT_MAX_BYTES = int(os.environ.get("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
DEFAULT_BACKUP_COUNT = int(os.environ.get("LOG_BACKUP_COUNT", "5"))

SENSITIVE_HEADERS = {"cookie", "set-cookie", "authorization", "proxy-authorization"}
REDACTED = "[redacted]"


def redact_headers(headers: Mapping[str, object]) -> dict[str, object]:
    """Return a copy of ``headers`` with credential-bearing values masked."""

    return {
        key: REDACTED if isinstance(key, str) and key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


class JsonFormatter(logging.Formatter):
    """Emit logs as structured JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
        }
        headers = getattr(record, "headers", None)
        if isinstance(headers, Mapping):
            payload["headers"] = dict(headers)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True, default=str)


class SensitiveDataFilter(logging.Filter):
    """Redact sensitive header values in structured arguments and ``extra``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, Mapping):
            record.args = redact_headers(record.args)
        headers = getattr(record, "headers", None)
        if isinstance(headers, Mapping):
            record.headers = redact_headers(headers)
        return True


def _console_handler(level: int) -> logging.Handler:
    return RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_path=False,
        level=level,
    )


def configure_logging(
    level: int = logging.INFO,
    *,
    json_logs: bool = False,
    logfile: Optional[Path | str] = None,
    suppress: Optional[Iterable[str]] = None,
) -> None:
    """Configure root logging with rotation and optional JSON output."""

    handlers: list[logging.Handler] = []

    console_handler = _console_handler(level)
    console_handler.addFilter(SensitiveDataFilter())
    handlers.append(console_handler)

    if logfile:
        path = Path(logfile)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=DEFAULT_MAX_BYTES,
            backupCount=DEFAULT_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.addFilter(SensitiveDataFilter())
        if json_logs:
            file_handler.setFormatter(JsonFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in suppress or ("urllib3", "charset_normalizer"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


__all__ = [
    "configure_logging",
    "JsonFormatter",
    "SensitiveDataFilter",
    "redact_headers",
]
