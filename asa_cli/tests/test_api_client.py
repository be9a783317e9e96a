# asa_cli/tests/test_api_client.py
import json
import unittest
from typing import List
from unittest.mock import MagicMock, patch

import requests

from asa_cli.http.client import ApiClient, encode_body, error_from_body
from asa_cli.http.errors import (
    APIError,
    DecodingError,
    EncodingError,
    RateLimitError,
    TransportError,
)
from asa_cli.http.hooks import NullHook
from asa_cli.http.retry import RetryPolicy
from asa_cli.models.campaign import Campaign, CampaignUpdate
from asa_cli.models.selector import Selector
from asa_cli.utils.selector_parsing import build_selector

BASE = "https://api.example.test/api/v5"


def _resp(status=200, body=b"", payload=None):
    r = requests.Response()
    r.status_code = status
    r._content = json.dumps(payload).encode() if payload is not None else body
    return r


class ClientTestCase(unittest.TestCase):
    """Real Session, so auth and request preparation run; only send() is faked."""

    def setUp(self):
        self.session = requests.Session()
        patcher = patch.object(self.session, "send")
        self.send = patcher.start()
        self.addCleanup(patcher.stop)

    def client(self, **kw):
        kw.setdefault("hook", NullHook())
        return ApiClient(session=self.session, base_url=BASE, **kw)

    def sent(self, i=0) -> requests.PreparedRequest:
        return self.send.call_args_list[i].args[0]


class TestSuccess(ClientTestCase):
    def test_get_decodes_list_and_page_info(self):
        self.send.return_value = _resp(
            payload={
                "data": [{"id": 1, "name": "A", "budgetAmount": {"amount": "10", "currency": "USD"}}],
                "pagination": {"totalResults": 1, "startIndex": 0, "itemsPerPage": 1},
            }
        )
        res = self.client().get("/campaigns", result_type=List[Campaign])
        self.assertEqual(res.data[0].id, 1)
        self.assertEqual(str(res.data[0].budget_amount), "10 USD")
        self.assertEqual(res.page_info.total_results, 1)
        self.assertEqual(self.sent().url, f"{BASE}/campaigns")
        self.assertEqual(self.send.call_args.kwargs["timeout"], 30.0)

    def test_no_data_type_returns_raw(self):
        self.send.return_value = _resp(payload={"data": {"anything": [1, 2]}})
        res = self.client().get("/raw")
        self.assertEqual(res.data, {"anything": [1, 2]})
        self.assertIsNone(res.page_info)

    def test_204_has_no_data_or_pagination(self):
        self.send.return_value = _resp(204)
        res = self.client().request("DELETE", "/campaigns/9")
        self.assertIsNone(res.data)
        self.assertIsNone(res.page_info)
        self.assertEqual(self.sent().method, "DELETE")

    def test_204_ignores_result_type(self):
        self.send.return_value = _resp(204)
        res = self.client().get("/campaigns", result_type=List[Campaign])
        self.assertIsNone(res.data)
        self.assertIsNone(res.page_info)

    def test_post_sends_wire_json(self):
        self.send.return_value = _resp(payload={"data": []})
        sel = build_selector(filters=["status=ENABLED"], sorts=["name:desc"], limit=5)
        self.client().post("/campaigns/find", body=sel, result_type=List[Campaign])

        req = self.sent()
        self.assertEqual(req.headers["Content-Type"], "application/json")
        self.assertEqual(
            json.loads(req.body),
            {
                "conditions": [{"field": "status", "operator": "EQUALS", "values": ["ENABLED"]}],
                "orderBy": [{"field": "name", "sortOrder": "DESCENDING"}],
                "pagination": {"offset": 0, "limit": 5},
            },
        )

    def test_put_wraps_campaign_update(self):
        self.send.return_value = _resp(payload={"data": {"id": 3, "name": "B"}})
        res = self.client().put("/campaigns/3", body=CampaignUpdate(name="B"), result_type=Campaign)
        self.assertEqual(json.loads(self.sent().body), {"campaign": {"name": "B"}})
        self.assertEqual(res.data.name, "B")


class TestErrors(ClientTestCase):
    def test_non_json_error_body_is_truncated(self):
        self.send.return_value = _resp(500, ("<html>" + "x" * 2000).encode())
        with self.assertRaises(APIError) as cm:
            self.client().get("/x")
        err = cm.exception
        self.assertEqual(err.http_status, 500)
        self.assertEqual(err.code, "HTTP_500")
        self.assertLessEqual(len(err.message), 500)
        self.assertTrue(err.message.startswith("<html>"))
        self.assertTrue(err.message.endswith("..."))

    def test_error_envelope_first_entry(self):
        self.send.return_value = _resp(
            400,
            payload={
                "data": None,
                "error": {
                    "errors": [
                        {"messageCode": "INVALID_INPUT", "message": "bad name", "field": "name"},
                        {"messageCode": "OTHER", "message": "ignored"},
                    ]
                },
            },
        )
        with self.assertRaises(APIError) as cm:
            self.client().post("/campaigns", body={"name": ""})
        err = cm.exception
        self.assertEqual(
            (err.code, err.message, err.field, err.http_status),
            ("INVALID_INPUT", "bad name", "name", 400),
        )
        self.assertIn("INVALID_INPUT", str(err))

    def test_error_envelope_on_2xx(self):
        self.send.return_value = _resp(
            200, payload={"error": {"errors": [{"messageCode": "NOT_FOUND", "message": "gone"}]}}
        )
        with self.assertRaises(APIError) as cm:
            self.client().get("/x")
        self.assertEqual(cm.exception.code, "NOT_FOUND")

    def test_429_is_rate_limit_error(self):
        self.send.return_value = _resp(429, b"Too Many Requests")
        with self.assertRaises(RateLimitError) as cm:
            self.client().get("/x")
        self.assertEqual(cm.exception.http_status, 429)

    def test_invalid_json_on_2xx_is_decoding_error(self):
        self.send.return_value = _resp(200, b"not json")
        with self.assertRaises(DecodingError):
            self.client().get("/x")

    def test_data_shape_mismatch_is_decoding_error(self):
        self.send.return_value = _resp(payload={"data": [{"id": "not-a-number"}]})
        with self.assertRaises(DecodingError):
            self.client().get("/x", result_type=List[Campaign])

    def test_encoding_error_sends_nothing(self):
        with self.assertRaises(EncodingError):
            self.client().post("/x", body={"when": object()})
        self.send.assert_not_called()

    def test_connection_failure_is_transport_error(self):
        self.send.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(TransportError):
            self.client().get("/x")

    def test_timeout_is_transport_error(self):
        self.send.side_effect = requests.Timeout("slow")
        with self.assertRaises(TransportError):
            self.client().get("/x")


class TestRetryAndHooks(ClientTestCase):
    def test_rate_limited_request_is_retried(self):
        self.send.side_effect = [
            _resp(429, b"slow"),
            _resp(429, b"slow"),
            _resp(payload={"data": [{"id": 1}]}),
        ]
        sleep = MagicMock()
        client = self.client(retry_policy=RetryPolicy(), sleep=sleep)
        res = client.post("/campaigns/find", body=Selector.new(), result_type=List[Campaign])

        self.assertEqual(res.data[0].id, 1)
        self.assertEqual(self.send.call_count, 3)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [2.0, 4.0])
        # same body each attempt
        self.assertEqual(self.sent(0).body, self.sent(2).body)

    def test_rate_limit_exhausted(self):
        self.send.side_effect = [_resp(429, b"slow") for _ in range(3)]
        sleep = MagicMock()
        with self.assertRaises(RateLimitError):
            self.client(retry_policy=RetryPolicy(), sleep=sleep).get("/x")
        self.assertEqual(self.send.call_count, 3)
        self.assertEqual(sleep.call_count, 2)

    def test_bad_request_is_not_retried(self):
        self.send.return_value = _resp(400, b"nope")
        sleep = MagicMock()
        with self.assertRaises(APIError):
            self.client(retry_policy=RetryPolicy(), sleep=sleep).get("/x")
        self.send.assert_called_once()
        sleep.assert_not_called()

    def test_hook_sees_request_and_response(self):
        self.send.return_value = _resp(payload={"data": {"ok": True}})
        hook = MagicMock()
        self.client(hook=hook).post("/x", body={"a": 1})

        req_evt = hook.on_request.call_args.args[0]
        resp_evt = hook.on_response.call_args.args[0]
        self.assertEqual((req_evt.method, req_evt.url), ("POST", f"{BASE}/x"))
        self.assertEqual(json.loads(req_evt.body), {"a": 1})
        self.assertEqual(resp_evt.status, 200)
        self.assertIn('"ok"', resp_evt.body)

    def test_hook_failure_does_not_break_request(self):
        self.send.return_value = _resp(payload={"data": 5})
        hook = MagicMock()
        hook.on_request.side_effect = RuntimeError("hook broke")
        hook.on_response.side_effect = RuntimeError("hook broke")
        self.assertEqual(self.client(hook=hook).get("/x").data, 5)


class TestHelpers(unittest.TestCase):
    def test_encode_body_none(self):
        self.assertIsNone(encode_body(None))

    def test_encode_body_list_of_models(self):
        out = json.loads(encode_body([Campaign(name="a"), Campaign(name="b")]))
        self.assertEqual([c["name"] for c in out], ["a", "b"])

    def test_error_from_body_short_text_untouched(self):
        err = error_from_body(502, "Bad Gateway")
        self.assertEqual(err.message, "Bad Gateway")
        self.assertEqual(err.code, "HTTP_502")
