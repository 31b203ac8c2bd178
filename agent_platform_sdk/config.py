"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from agent_platform_sdk.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.agent-platform.com/v1"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_MAX_PAGES = 1000
DEFAULT_RATE_LIMIT = 1000  # requests per hour per key

ENVIRONMENT_BASE_URLS = {
    "production": DEFAULT_BASE_URL,
    "staging": "https://staging-api.agent-platform.com/v1",
    "development": "http://localhost:8080/v1",
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ClientOptions:
    """Immutable client settings. Use ``dataclasses.replace`` to derive variants."""

    api_key: str | None = None
    bearer_token: str | None = None
    api_secret: str | None = field(default=None, repr=False)
    signed_tokens: bool = False  # send HS256 JWTs signed with api_secret instead of the raw key
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT_MS  # milliseconds, per request
    retries: int = DEFAULT_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    debug: bool = False
    environment: str = "production"
    max_pages: int = DEFAULT_MAX_PAGES

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.retries < 0:
            raise ConfigurationError(f"retries must not be negative, got {self.retries}")
        if self.retry_delay < 0:
            raise ConfigurationError(f"retry_delay must not be negative, got {self.retry_delay}")
        if self.max_pages <= 0:
            raise ConfigurationError(f"max_pages must be positive, got {self.max_pages}")
        if self.signed_tokens and not (self.api_key and self.api_secret):
            raise ConfigurationError("signed_tokens requires both api_key and api_secret")
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"base_url must be an absolute http(s) URL, got {self.base_url!r}")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key or self.bearer_token)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    def __repr__(self) -> str:
        key = "***" if self.api_key else None
        token = "***" if self.bearer_token else None
        return (
            f"ClientOptions(api_key={key!r}, bearer_token={token!r}, "
            f"base_url={self.base_url!r}, timeout={self.timeout}, retries={self.retries}, "
            f"signed_tokens={self.signed_tokens}, debug={self.debug}, environment={self.environment!r})"
        )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> ClientOptions:
        """Build options from ``API_KEY``, ``API_SECRET``, ``ENVIRONMENT`` and friends.

        ``API_SECRET`` alone does not change the credential sent; signed tokens
        are enabled with ``AGENT_PLATFORM_SIGNED_TOKENS=true``.

        Explicit keyword overrides take precedence over the environment.
        """
        env = os.environ if environ is None else environ
        environment = overrides.pop("environment", None) or env.get("ENVIRONMENT", "production")
        environment = environment.lower()

        values: dict[str, Any] = {
            "api_key": env.get("API_KEY") or None,
            "api_secret": env.get("API_SECRET") or None,
            "bearer_token": env.get("AGENT_PLATFORM_BEARER_TOKEN") or None,
            "environment": environment,
            "debug": env.get("AGENT_PLATFORM_DEBUG", "").lower() in _TRUTHY,
            "signed_tokens": env.get("AGENT_PLATFORM_SIGNED_TOKENS", "").lower() in _TRUTHY,
        }
        base_url = env.get("AGENT_PLATFORM_BASE_URL")
        if base_url:
            values["base_url"] = base_url
        elif environment in ENVIRONMENT_BASE_URLS:
            values["base_url"] = ENVIRONMENT_BASE_URLS[environment]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
