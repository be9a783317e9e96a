# asa_cli/tests/test_logging_and_hooks.py
import json
import logging
from unittest.mock import patch

from asa_cli.http.hooks import LoggingHook, RequestEvent, ResponseEvent, truncate
from asa_cli.logging_utils import (
    CorrelationIdFilter,
    JsonFormatter,
    correlation_id_ctx,
    invocation_scope,
)


def _record(msg="hello", **extra):
    rec = logging.LogRecord("asa_cli.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_invocation_scope_binds_and_resets():
    assert correlation_id_ctx.get() == "-"
    with invocation_scope("abc123") as cid:
        assert cid == "abc123"
        rec = _record()
        CorrelationIdFilter().filter(rec)
        assert rec.correlation_id == "abc123"
    assert correlation_id_ctx.get() == "-"


def test_invocation_scope_generates_id():
    with invocation_scope() as cid:
        assert len(cid) == 12


def test_json_formatter_merges_event():
    rec = _record(correlation_id="cid-1", event={"status": 429})
    out = json.loads(JsonFormatter().format(rec))
    assert out["msg"] == "hello"
    assert out["level"] == "INFO"
    assert out["correlation_id"] == "cid-1"
    assert out["status"] == 429


def test_truncate():
    assert truncate("short", 500) == "short"
    assert truncate("x" * 600, 500) == "x" * 497 + "..."
    assert len(truncate("x" * 600, 500)) == 500
    assert truncate("abcdef", 2) == "ab"


def test_logging_hook_caps_bodies():
    hook = LoggingHook(max_chars=10)
    with patch("asa_cli.http.hooks.logger") as log:
        hook.on_request(RequestEvent("POST", "https://x/y", "b" * 50))
        hook.on_response(ResponseEvent("POST", "https://x/y", 200, "", 12))
    req_args = log.debug.call_args_list[0].args
    assert req_args[-1] == "b" * 7 + "..."
    resp_args = log.debug.call_args_list[1].args
    assert resp_args[-1] == "-"
