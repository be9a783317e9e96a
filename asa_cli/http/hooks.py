# asa_cli/http/hooks.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

LOG_BODY_CHARS = 2000


def truncate(s: str, max_chars: int) -> str:
    """Cap s at max_chars, marking the cut with '...' (included in the cap)."""
    if max_chars <= 0 or len(s) <= max_chars:
        return s
    if max_chars <= 3:
        return s[:max_chars]
    return s[: max_chars - 3] + "..."


@dataclass
class RequestEvent:
    method: str
    url: str
    body: Optional[str]


@dataclass
class ResponseEvent:
    method: str
    url: str
    status: int
    body: str
    elapsed_ms: int


class RequestHook(Protocol):
    def on_request(self, event: RequestEvent) -> None: ...

    def on_response(self, event: ResponseEvent) -> None: ...


class LoggingHook:
    """Default hook: request/response bodies at DEBUG, capped at 2000 chars."""

    def __init__(self, max_chars: int = LOG_BODY_CHARS) -> None:
        self.max_chars = max_chars

    def on_request(self, event: RequestEvent) -> None:
        logger.debug(
            "> %s %s body=%s",
            event.method,
            event.url,
            truncate(event.body, self.max_chars) if event.body else "-",
        )

    def on_response(self, event: ResponseEvent) -> None:
        logger.debug(
            "< %s %s %d %dms body=%s",
            event.method,
            event.url,
            event.status,
            event.elapsed_ms,
            truncate(event.body, self.max_chars) if event.body else "-",
        )


class NullHook:
    def on_request(self, event: RequestEvent) -> None:
        pass

    def on_response(self, event: ResponseEvent) -> None:
        pass
