# asa_cli/http/auth.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional, Protocol

import requests
from requests.auth import AuthBase
from jose import jwt
from jose.exceptions import JOSEError

from asa_cli.config.app_config import Settings
from asa_cli.http.errors import AuthError

logger = logging.getLogger(__name__)

ORG_CONTEXT_HEADER = "X-AP-Context"
TOKEN_SCOPE = "searchadsorg"
CLIENT_SECRET_AUDIENCE = "https://appleid.apple.com"
CLIENT_SECRET_TTL = timedelta(days=180)
DEFAULT_TOKEN_TTL = 3600


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuthToken:
    value: str
    expires_at: datetime
    issued_at: Optional[datetime] = None

    def expired(self, now: Optional[datetime] = None, skew_seconds: int = 60) -> bool:
        now = now or _now_utc()
        skew = timedelta(seconds=skew_seconds)
        if self.issued_at is not None:
            # short-lived tokens: refresh at half life, not before first use
            skew = min(skew, (self.expires_at - self.issued_at) / 2)
        return now >= self.expires_at - skew


class TokenProvider(Protocol):
    def fetch_token(self) -> AuthToken: ...


def build_client_secret(
    client_id: str,
    team_id: str,
    key_id: str,
    private_key: str,
    now: Optional[datetime] = None,
) -> str:
    """
    Sign the OAuth client secret: an ES256 JWT issued by the team for the
    client, valid for 180 days.
    """
    now = now or _now_utc()
    claims = {
        "sub": client_id,
        "iss": team_id,
        "aud": CLIENT_SECRET_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int((now + CLIENT_SECRET_TTL).timestamp()),
    }
    try:
        return jwt.encode(claims, private_key, algorithm="ES256", headers={"kid": key_id})
    except JOSEError as e:
        raise AuthError(f"signing client secret: {e}") from e


class ClientCredentialsTokenProvider:
    """Exchanges client credentials for a bearer token at the token endpoint."""

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        self.settings = settings
        self._session = session or requests.Session()
        self._clock = clock
        self._client_secret: Optional[str] = settings.client_secret or None

    def _secret(self) -> str:
        if self._client_secret:
            return self._client_secret
        s = self.settings
        try:
            private_key = Path(s.private_key_path).expanduser().read_text(encoding="utf-8")
        except OSError as e:
            raise AuthError(f"reading private key {s.private_key_path}: {e}") from e
        self._client_secret = build_client_secret(
            s.client_id, s.team_id, s.key_id, private_key, now=self._clock()
        )
        return self._client_secret

    def fetch_token(self) -> AuthToken:
        form = {
            "grant_type": "client_credentials",
            "client_id": self.settings.client_id,
            "client_secret": self._secret(),
            "scope": TOKEN_SCOPE,
        }
        try:
            resp = self._session.post(
                self.settings.token_url, data=form, timeout=self.settings.timeout
            )
        except requests.RequestException as e:
            raise AuthError(f"token request failed: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            raise AuthError(
                f"token request rejected (HTTP {resp.status_code}): {resp.text[:500]}"
            )
        try:
            payload = resp.json()
        except ValueError as e:
            raise AuthError("token response is not JSON") from e

        access = payload.get("access_token") if isinstance(payload, dict) else None
        if not access:
            raise AuthError("token response did not include an access_token")
        try:
            ttl = int(payload.get("expires_in") or DEFAULT_TOKEN_TTL)
        except (TypeError, ValueError):
            ttl = DEFAULT_TOKEN_TTL
        logger.debug("obtained access token, expires_in=%ss", ttl)
        now = self._clock()
        return AuthToken(
            value=access, expires_at=now + timedelta(seconds=ttl), issued_at=now
        )


class TokenCache:
    """
    Holds at most one token. Read-check-refresh-write happens under a single
    lock, so concurrent callers trigger one refresh and never see a partial
    token.
    """

    def __init__(
        self, clock: Callable[[], datetime] = _now_utc, skew_seconds: int = 60
    ) -> None:
        self._lock = threading.Lock()
        self._token: Optional[AuthToken] = None
        self._clock = clock
        self._skew = skew_seconds

    def get(self, provider: TokenProvider, force: bool = False) -> AuthToken:
        with self._lock:
            tok = self._token
            if force or tok is None or tok.expired(self._clock(), self._skew):
                tok = provider.fetch_token()
                self._token = tok
            return tok

    def invalidate(self) -> None:
        with self._lock:
            self._token = None


class AuthTransport(AuthBase):
    """
    Decorates every outgoing request with a bearer token and the org scope
    header. Token acquisition errors surface as AuthError.

    A 401 from the API is not handled here; forcing one refresh and replaying
    the request would be the natural extension.
    """

    def __init__(
        self,
        provider: TokenProvider,
        org_id: str,
        cache: Optional[TokenCache] = None,
    ) -> None:
        self.provider = provider
        self.org_id = str(org_id)
        self.cache = cache or TokenCache()

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        token = self.cache.get(self.provider)
        r.headers["Authorization"] = f"Bearer {token.value}"
        r.headers[ORG_CONTEXT_HEADER] = f"orgId={self.org_id}"
        return r
