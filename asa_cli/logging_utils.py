# asa_cli/logging_utils.py
from __future__ import annotations

import json
import logging
import os
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Per-invocation correlation ID
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="-")

_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # provide %(correlation_id)s to all formatters
        record.correlation_id = correlation_id_ctx.get()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "-"),
        }
        # callers may attach a structured payload via extra={"event": {...}}
        evt = getattr(record, "event", None)
        if isinstance(evt, dict):
            payload.update(evt)
        return json.dumps(payload, ensure_ascii=True)


_CONFIGURED = False


def _env_truthy(name: str, default: str = "false") -> bool:
    val = os.getenv(name, default)
    return str(val).strip().lower() in {"true", "1", "t", "yes", "y", "on"}


def _env_level(default: int) -> int:
    raw = (os.getenv("LOG_LEVEL") or "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


def setup_logging(level: Optional[int] = None) -> None:
    """
    Idempotent logging setup for the CLI. Logs go to stderr so that stdout
    stays clean for JSON/table output.

    A later call may still lower/raise the level (e.g. --verbose after an
    import-time setup), but handlers are only attached once.
    """
    global _CONFIGURED
    root = logging.getLogger("asa_cli")
    if level is None:
        level = _env_level(logging.WARNING)

    if _CONFIGURED:
        root.setLevel(level)
        return

    filt = CorrelationIdFilter()
    handler = logging.StreamHandler()
    if _env_truthy("LOG_JSON"):
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_FORMAT))
    handler.addFilter(filt)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    _CONFIGURED = True


@contextmanager
def invocation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of one command invocation."""
    cid = correlation_id or uuid.uuid4().hex[:12]
    token = correlation_id_ctx.set(cid)
    try:
        yield cid
    finally:
        correlation_id_ctx.reset(token)
