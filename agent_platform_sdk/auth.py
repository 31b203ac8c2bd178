"""Credential handling for outgoing requests.

Every request carries ``Authorization: Bearer <credential>``. The credential is
the configured bearer token, else the API key. With ``signed_tokens`` enabled
and an API secret configured, the key is exchanged locally for a short-lived
HS256 JWT signed with the secret, so the secret itself never leaves the process.
"""

from __future__ import annotations

import threading
import time
from typing import Generator

import httpx
import jwt

from agent_platform_sdk.config import ClientOptions
from agent_platform_sdk.exceptions import AuthenticationError, UNAUTHORIZED

_SIGNED_TOKEN_TTL_SECONDS = 300
_REFRESH_MARGIN_SECONDS = 30


class BearerAuth(httpx.Auth):
    """Static bearer credential (token or raw API key)."""

    def __init__(self, credential: str) -> None:
        self._credential = credential

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._credential}"
        yield request


class SignedTokenAuth(httpx.Auth):
    """Bearer JWT minted from an API key and secret, refreshed before expiry."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        ttl_seconds: int = _SIGNED_TOKEN_TTL_SECONDS,
        audience: str = "agent-platform",
    ) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self._ttl = ttl_seconds
        self._audience = audience
        self._token = ""
        self._expires_at = 0.0
        self._lock = threading.Lock()

    def token(self) -> str:
        with self._lock:
            now = time.time()
            if not self._token or now >= self._expires_at - _REFRESH_MARGIN_SECONDS:
                self._expires_at = now + self._ttl
                claims = {
                    "iss": self._api_key,
                    "sub": self._api_key,
                    "aud": self._audience,
                    "iat": int(now),
                    "exp": int(self._expires_at),
                }
                self._token = jwt.encode(claims, self._api_secret, algorithm="HS256")
            return self._token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.token()}"
        yield request


def require_credentials(options: ClientOptions) -> None:
    """Fail fast when neither an API key nor a bearer token is configured."""
    if not options.has_credentials:
        raise AuthenticationError(
            "no credentials configured: set api_key or bearer_token",
            code=UNAUTHORIZED,
        )


def auth_for(options: ClientOptions) -> httpx.Auth | None:
    """Pick the auth flow for the configured credentials, or None if there are none."""
    if options.bearer_token:
        return BearerAuth(options.bearer_token)
    if options.signed_tokens and options.api_key and options.api_secret:
        return SignedTokenAuth(options.api_key, options.api_secret)
    if options.api_key:
        return BearerAuth(options.api_key)
    return None
