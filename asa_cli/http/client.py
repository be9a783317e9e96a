# asa_cli/http/client.py
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from requests.auth import AuthBase
from pydantic import BaseModel, TypeAdapter, ValidationError

from asa_cli.config.app_config import BASE_URL, DEFAULT_TIMEOUT
from asa_cli.http.errors import (
    APIError,
    DecodingError,
    EncodingError,
    TransportError,
    api_error_for,
)
from asa_cli.http.hooks import (
    LoggingHook,
    RequestEvent,
    RequestHook,
    ResponseEvent,
    truncate,
)
from asa_cli.http.retry import RetryPolicy, retry_on_rate_limit
from asa_cli.models.common import Envelope, PageInfo

logger = logging.getLogger(__name__)

ERROR_BODY_CHARS = 500
JSON_CONTENT_TYPE = "application/json"


# ---- small, local helpers ----


def _to_jsonable(body: Any) -> Any:
    if isinstance(body, BaseModel):
        to_wire = getattr(body, "to_wire", None)
        if callable(to_wire):
            return to_wire()
        return body.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(body, (list, tuple)):
        return [_to_jsonable(b) for b in body]
    return body


def encode_body(body: Any) -> Optional[bytes]:
    """
    Serialize a request body to JSON bytes. Pydantic models go out by wire
    alias; everything else must be json.dumps-able.
    """
    if body is None:
        return None
    try:
        return json.dumps(_to_jsonable(body), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"marshaling request body: {e}") from e


def error_from_body(status: int, text: str) -> APIError:
    """
    Build the APIError for a non-2xx response. Uses the first entry of an
    error envelope when the body has one, otherwise the raw body capped at
    500 characters.
    """
    try:
        env = Envelope.model_validate_json(text) if text else None
    except ValidationError:
        env = None
    first = env.first_error() if env is not None else None
    if first is not None:
        return api_error_for(
            first.message_code or f"HTTP_{status}",
            first.message,
            http_status=status,
            field=first.field,
        )
    return api_error_for(
        f"HTTP_{status}", truncate(text, ERROR_BODY_CHARS), http_status=status
    )


# ---- result model ----


@dataclass
class ApiResult:
    data: Any
    page_info: Optional[PageInfo]


# ---- executor ----


class ApiClient:
    """
    Executes one logical API call per request():
      encode body -> send (auth decorates) -> unwrap envelope -> decode data

    Returns ApiResult(data, page_info) or raises one of the AsaError types.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        auth: Optional[AuthBase] = None,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        hook: Optional[RequestHook] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session or requests.Session()
        self.auth = auth
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self.hook = hook or LoggingHook()
        self.retry_policy = retry_policy
        self._sleep = sleep

    # -- convenience verbs --

    def get(self, path: str, result_type: Any = None) -> ApiResult:
        return self.request("GET", path, result_type=result_type)

    def post(self, path: str, body: Any = None, result_type: Any = None) -> ApiResult:
        return self.request("POST", path, body=body, result_type=result_type)

    def put(self, path: str, body: Any = None, result_type: Any = None) -> ApiResult:
        return self.request("PUT", path, body=body, result_type=result_type)

    def delete(self, path: str) -> None:
        self.request("DELETE", path)

    # -- core --

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        result_type: Any = None,
    ) -> ApiResult:
        # encode once, outside the retry loop: encoding errors are never retried
        payload = encode_body(body)

        def call() -> ApiResult:
            return self._send(method.upper(), path, payload, result_type)

        if self.retry_policy is None:
            return call()
        return retry_on_rate_limit(call, self.retry_policy, sleep=self._sleep)

    def _emit(self, name: str, event: Any) -> None:
        try:
            getattr(self.hook, name)(event)
        except Exception:
            logger.warning("request hook %s failed", name, exc_info=True)

    def _send(
        self,
        method: str,
        path: str,
        payload: Optional[bytes],
        result_type: Any,
    ) -> ApiResult:
        url = self.base_url + path
        headers = {"Content-Type": JSON_CONTENT_TYPE, "Accept": JSON_CONTENT_TYPE}
        self._emit(
            "on_request",
            RequestEvent(
                method=method,
                url=url,
                body=payload.decode("utf-8", errors="replace") if payload else None,
            ),
        )

        t0 = time.monotonic()
        try:
            resp = self.session.request(
                method,
                url,
                data=payload,
                headers=headers,
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        raw = resp.content or b""
        text = raw.decode("utf-8", errors="replace")
        self._emit(
            "on_response",
            ResponseEvent(
                method=method,
                url=url,
                status=resp.status_code,
                body=text,
                elapsed_ms=int((time.monotonic() - t0) * 1000),
            ),
        )

        # no body, no data, no pagination (e.g. DELETE)
        if resp.status_code == 204:
            return ApiResult(data=None, page_info=None)

        if resp.status_code < 200 or resp.status_code >= 300:
            raise error_from_body(resp.status_code, text)

        try:
            envelope = Envelope.model_validate_json(raw)
        except ValidationError as e:
            raise DecodingError(f"parsing API response: {e}") from e

        first = envelope.first_error()
        if first is not None:
            raise api_error_for(
                first.message_code or f"HTTP_{resp.status_code}",
                first.message,
                http_status=resp.status_code,
                field=first.field,
            )

        data = envelope.data
        if data is not None and result_type is not None:
            try:
                data = TypeAdapter(result_type).validate_python(data)
            except ValidationError as e:
                raise DecodingError(f"parsing response data: {e}") from e

        return ApiResult(data=data, page_info=envelope.pagination)
