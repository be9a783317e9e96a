# asa_cli/tests/test_auth.py
import json
import os
import tempfile
import threading
import time
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jose import jwt

from asa_cli.config.app_config import Settings
from asa_cli.http.auth import (
    AuthToken,
    AuthTransport,
    ClientCredentialsTokenProvider,
    TokenCache,
    build_client_secret,
)
from asa_cli.http.client import ApiClient
from asa_cli.http.errors import AuthError
from asa_cli.http.hooks import NullHook

TOKEN_URL = "https://auth.example.test/oauth2/token"
T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now


def _settings(**kw):
    base = dict(
        client_id="SEARCHADS.abc",
        team_id="SEARCHADS.abc",
        key_id="key-1",
        org_id="4242",
        client_secret="prebuilt-secret",
        token_url=TOKEN_URL,
    )
    base.update(kw)
    return Settings(**base)


def _pem_key() -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()


class TestAuthToken(unittest.TestCase):
    def test_expiry_with_skew(self):
        tok = AuthToken("t", T0 + timedelta(seconds=120))
        self.assertFalse(tok.expired(T0))
        self.assertFalse(tok.expired(T0 + timedelta(seconds=59)))
        self.assertTrue(tok.expired(T0 + timedelta(seconds=60)))
        self.assertTrue(tok.expired(T0 + timedelta(seconds=200)))

    def test_short_lived_token_usable_until_half_life(self):
        tok = AuthToken("t", T0 + timedelta(seconds=30), issued_at=T0)
        self.assertFalse(tok.expired(T0))
        self.assertFalse(tok.expired(T0 + timedelta(seconds=14)))
        self.assertTrue(tok.expired(T0 + timedelta(seconds=15)))

    def test_long_lived_token_keeps_full_skew(self):
        tok = AuthToken("t", T0 + timedelta(seconds=3600), issued_at=T0)
        self.assertFalse(tok.expired(T0 + timedelta(seconds=3539)))
        self.assertTrue(tok.expired(T0 + timedelta(seconds=3540)))


class TestClientSecret(unittest.TestCase):
    def test_claims_and_header(self):
        secret = build_client_secret("client", "team", "kid-9", _pem_key(), now=T0)
        claims = jwt.get_unverified_claims(secret)
        header = jwt.get_unverified_header(secret)
        self.assertEqual(claims["sub"], "client")
        self.assertEqual(claims["iss"], "team")
        self.assertEqual(claims["aud"], "https://appleid.apple.com")
        self.assertEqual(claims["iat"], int(T0.timestamp()))
        self.assertEqual(claims["exp"] - claims["iat"], 180 * 24 * 3600)
        self.assertEqual(header["kid"], "kid-9")
        self.assertEqual(header["alg"], "ES256")

    def test_bad_key_is_auth_error(self):
        with self.assertRaises(AuthError):
            build_client_secret("client", "team", "kid", "not a pem key", now=T0)


class TestTokenCache(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.provider = MagicMock()
        self.provider.fetch_token.side_effect = lambda: AuthToken(
            f"tok-{self.provider.fetch_token.call_count}",
            self.clock.now + timedelta(seconds=3600),
        )
        self.cache = TokenCache(clock=self.clock)

    def test_reuses_valid_token(self):
        a = self.cache.get(self.provider)
        b = self.cache.get(self.provider)
        self.assertIs(a, b)
        self.provider.fetch_token.assert_called_once()

    def test_refreshes_near_expiry(self):
        self.assertEqual(self.cache.get(self.provider).value, "tok-1")
        self.clock.now = T0 + timedelta(seconds=3600 - 30)
        self.assertEqual(self.cache.get(self.provider).value, "tok-2")

    def test_force_and_invalidate(self):
        self.cache.get(self.provider)
        self.assertEqual(self.cache.get(self.provider, force=True).value, "tok-2")
        self.cache.invalidate()
        self.assertEqual(self.cache.get(self.provider).value, "tok-3")

    def test_short_ttl_token_is_cached(self):
        self.provider.fetch_token.side_effect = lambda: AuthToken(
            "short", self.clock.now + timedelta(seconds=60), issued_at=self.clock.now
        )
        self.cache.get(self.provider)
        self.cache.get(self.provider)
        self.provider.fetch_token.assert_called_once()

    def test_provider_error_leaves_cache_empty(self):
        self.provider.fetch_token.side_effect = AuthError("nope")
        with self.assertRaises(AuthError):
            self.cache.get(self.provider)
        self.provider.fetch_token.side_effect = None
        self.provider.fetch_token.return_value = AuthToken("ok", T0 + timedelta(hours=1))
        self.assertEqual(self.cache.get(self.provider).value, "ok")

    def test_concurrent_callers_share_one_refresh(self):
        calls = []

        def slow_fetch():
            calls.append(1)
            time.sleep(0.05)
            return AuthToken("shared", T0 + timedelta(hours=1))

        provider = MagicMock()
        provider.fetch_token.side_effect = slow_fetch
        cache = TokenCache(clock=self.clock)
        seen = []
        threads = [
            threading.Thread(target=lambda: seen.append(cache.get(provider).value))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(calls), 1)
        self.assertEqual(seen, ["shared"] * 8)


def _resp(status=200, payload=None, body=b""):
    r = requests.Response()
    r.status_code = status
    r._content = json.dumps(payload).encode() if payload is not None else body
    return r


class TestTokenProvider(unittest.TestCase):
    def _session(self, *responses_or_errors):
        s = MagicMock()
        s.post.side_effect = list(responses_or_errors)
        return s

    def test_fetch_token_posts_client_credentials(self):
        session = self._session(
            _resp(payload={"access_token": "abc", "token_type": "Bearer", "expires_in": 3600})
        )
        tok = ClientCredentialsTokenProvider(_settings(), session=session, clock=FakeClock()).fetch_token()

        self.assertEqual(tok.value, "abc")
        self.assertEqual(tok.expires_at, T0 + timedelta(seconds=3600))
        self.assertEqual(tok.issued_at, T0)
        url = session.post.call_args.args[0]
        form = session.post.call_args.kwargs["data"]
        self.assertEqual(url, TOKEN_URL)
        self.assertEqual(form["grant_type"], "client_credentials")
        self.assertEqual(form["client_id"], "SEARCHADS.abc")
        self.assertEqual(form["client_secret"], "prebuilt-secret")
        self.assertEqual(form["scope"], "searchadsorg")

    def test_default_ttl_without_expires_in(self):
        session = self._session(_resp(payload={"access_token": "abc"}))
        tok = ClientCredentialsTokenProvider(_settings(), session=session, clock=FakeClock()).fetch_token()
        self.assertEqual(tok.expires_at, T0 + timedelta(seconds=3600))

    def test_signs_secret_from_private_key_file(self):
        session = self._session(
            _resp(payload={"access_token": "a"}), _resp(payload={"access_token": "b"})
        )
        with tempfile.NamedTemporaryFile("w", suffix=".pem", delete=False) as f:
            f.write(_pem_key())
        try:
            s = _settings(client_secret="", private_key_path=f.name)
            provider = ClientCredentialsTokenProvider(s, session=session, clock=FakeClock())
            provider.fetch_token()
            provider.fetch_token()
        finally:
            os.unlink(f.name)
        secrets = [c.kwargs["data"]["client_secret"] for c in session.post.call_args_list]
        self.assertTrue(secrets[0].startswith("ey"))
        # signed once, reused for later token requests
        self.assertEqual(secrets[0], secrets[1])
        self.assertEqual(jwt.get_unverified_claims(secrets[0])["sub"], "SEARCHADS.abc")

    def test_missing_private_key_file(self):
        session = self._session()
        s = _settings(client_secret="", private_key_path="/nonexistent/key.pem")
        with self.assertRaises(AuthError):
            ClientCredentialsTokenProvider(s, session=session).fetch_token()
        session.post.assert_not_called()

    def test_rejected_token_request(self):
        session = self._session(_resp(401, payload={"error": "invalid_client"}))
        with self.assertRaises(AuthError) as cm:
            ClientCredentialsTokenProvider(_settings(), session=session).fetch_token()
        self.assertIn("401", str(cm.exception))

    def test_response_without_access_token(self):
        session = self._session(_resp(payload={"token_type": "Bearer"}))
        with self.assertRaises(AuthError):
            ClientCredentialsTokenProvider(_settings(), session=session).fetch_token()

    def test_non_json_token_response(self):
        session = self._session(_resp(body=b"<html>oops</html>"))
        with self.assertRaises(AuthError):
            ClientCredentialsTokenProvider(_settings(), session=session).fetch_token()

    def test_token_endpoint_unreachable(self):
        session = self._session(requests.ConnectionError("down"))
        with self.assertRaises(AuthError):
            ClientCredentialsTokenProvider(_settings(), session=session).fetch_token()


class TestAuthTransport(unittest.TestCase):
    def _provider(self, value="tok"):
        p = MagicMock()
        p.fetch_token.return_value = AuthToken(value, datetime.now(timezone.utc) + timedelta(hours=1))
        return p

    def _client(self, transport):
        session = requests.Session()
        patcher = patch.object(session, "send", return_value=_resp(payload={"data": []}))
        send = patcher.start()
        self.addCleanup(patcher.stop)
        client = ApiClient(
            session=session, base_url="https://api.example.test", auth=transport, hook=NullHook()
        )
        return client, send

    def test_sets_bearer_and_org_headers(self):
        transport = AuthTransport(self._provider(), 4242)
        req = requests.Request("GET", "https://api.example.test/x").prepare()
        out = transport(req)
        self.assertEqual(out.headers["Authorization"], "Bearer tok")
        self.assertEqual(out.headers["X-AP-Context"], "orgId=4242")

    def test_headers_reach_the_wire(self):
        provider = self._provider("wire")
        client, send = self._client(AuthTransport(provider, "7"))
        client.get("/acls")
        client.get("/acls")
        sent = send.call_args.args[0].headers
        self.assertEqual(sent["Authorization"], "Bearer wire")
        self.assertEqual(sent["X-AP-Context"], "orgId=7")
        # cached between calls
        provider.fetch_token.assert_called_once()

    def test_token_failure_surfaces_as_auth_error(self):
        p = MagicMock()
        p.fetch_token.side_effect = AuthError("token request rejected")
        client, send = self._client(AuthTransport(p, "7"))
        with self.assertRaises(AuthError):
            client.get("/acls")
        send.assert_not_called()
