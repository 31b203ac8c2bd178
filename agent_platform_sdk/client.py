"""Unified HTTP client for the Agent Platform API."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Callable

import httpx

from agent_platform_sdk import __version__
from agent_platform_sdk.agents import AgentClient
from agent_platform_sdk.auth import auth_for, require_credentials
from agent_platform_sdk.config import ClientOptions
from agent_platform_sdk.exceptions import ApiStatusError, TransportError, error_from_response
from agent_platform_sdk.logging import get_logger
from agent_platform_sdk.models import ApiResponse, RateLimitInfo
from agent_platform_sdk.resources import ResourceClient
from agent_platform_sdk.tasks import TaskClient

log = get_logger()

_IDEMPOTENT_METHODS = {"GET", "HEAD", "OPTIONS", "PUT", "DELETE"}


class AgentPlatformClient:
    """Unified client for all Agent Platform API operations.

    Usage:
        client = AgentPlatformClient(api_key="ak_live_...")
        agent = client.agents.create({"name": "research-bot"})
        task = client.agents.execute(agent.id, {"input": "summarise today's news"})
        print(client.tasks.wait(task.id).result)

    From the environment (API_KEY, API_SECRET, ENVIRONMENT):
        client = AgentPlatformClient(ClientOptions.from_env())

    Transport failures and 5xx responses are retried ``retries`` times with
    linear backoff (``attempt * retry_delay`` seconds). POST requests are only
    retried when ``retry_writes=True``, since the API has no idempotency keys.
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        *,
        api_key: str | None = None,
        bearer_token: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
        retries: int | None = None,
        debug: bool | None = None,
        retry_writes: bool = False,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        overrides = {
            "api_key": api_key,
            "bearer_token": bearer_token,
            "base_url": base_url,
            "timeout": timeout,
            "retries": retries,
            "debug": debug,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if options is None:
            options = ClientOptions(**overrides)
        elif overrides:
            options = replace(options, **overrides)

        self._options = options
        self._retry_writes = retry_writes
        self._sleep = sleep
        self._clock = clock
        self.last_rate_limit: RateLimitInfo | None = None

        self._http = httpx.Client(
            base_url=options.base_url,
            timeout=httpx.Timeout(options.timeout_seconds),
            auth=auth_for(options),
            transport=transport,
            headers={
                "Accept": "application/json",
                "User-Agent": f"agent-platform-sdk-python/{__version__}",
            },
        )

        self.agents = AgentClient(self)
        self.tasks = TaskClient(self)
        self.items = ResourceClient(self, "/items")

    @property
    def options(self) -> ClientOptions:
        return self._options

    def resource(self, path: str) -> ResourceClient:
        """Generic CRUD accessor for any collection endpoint."""
        return ResourceClient(self, path)

    # --- Dispatch ---

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: dict[str, Any] | None = None,
    ) -> ApiResponse[Any]:
        """Send one API call and return the parsed envelope.

        Raises the mapped ApiStatusError subclass for failure responses and
        TransportError when no response could be obtained.
        """
        require_credentials(self._options)
        method = method.upper()
        params = {k: v for k, v in (query or {}).items() if v is not None}
        retryable = method in _IDEMPOTENT_METHODS or self._retry_writes
        attempts = 1 + (self._options.retries if retryable else 0)

        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            if self._options.debug:
                log.debug("request_started", method=method, path=path, attempt=attempt, params=params)
            started = time.monotonic()
            try:
                response = self._http.request(
                    method,
                    path,
                    json=body,
                    params=params or None,
                )
            except httpx.TimeoutException as e:
                last_error = TransportError(
                    f"{method} {path} timed out after {self._options.timeout}ms",
                    details={"reason": str(e)},
                )
            except httpx.TransportError as e:
                last_error = TransportError(
                    f"{method} {path} failed: {e}",
                    details={"reason": str(e)},
                )
            else:
                duration_ms = int((time.monotonic() - started) * 1000)
                if self._options.debug:
                    log.debug(
                        "request_completed",
                        method=method,
                        path=path,
                        status_code=response.status_code,
                        duration_ms=duration_ms,
                    )
                if response.status_code < 500:
                    return self._handle_response(response)
                last_error = self._error_for(response, self._decode(response))

            if attempt < attempts:
                delay = attempt * self._options.retry_delay
                log.warning(
                    "request_retry",
                    method=method,
                    path=path,
                    attempt=attempt,
                    delay_seconds=delay,
                    error=str(last_error),
                )
                self._sleep(delay)

        log.warning("request_failed", method=method, path=path, attempts=attempts, error=str(last_error))
        raise last_error

    def get_data(self, path: str, **params: Any) -> Any:
        """GET ``path`` and return only the envelope's ``data``."""
        return self.request("GET", path, query=params).data

    def sleep(self, seconds: float) -> None:
        self._sleep(seconds)

    def monotonic(self) -> float:
        """Current time on the clock that paces ``sleep``."""
        return self._clock()

    # --- Response handling ---

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _error_for(self, response: httpx.Response, payload: Any) -> ApiStatusError:
        return error_from_response(response.status_code, payload, dict(response.headers))

    def _handle_response(self, response: httpx.Response) -> ApiResponse[Any]:
        payload = self._decode(response)
        headers = dict(response.headers)
        rate_limit = RateLimitInfo.from_headers(headers)
        if rate_limit is not None:
            self.last_rate_limit = rate_limit
        if response.status_code >= 400:
            raise self._error_for(response, payload)

        envelope = ApiResponse.from_payload(payload, response.status_code, headers)
        if not envelope.success:
            raise self._error_for(response, payload)
        return envelope

    # --- Lifecycle ---

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> AgentPlatformClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
