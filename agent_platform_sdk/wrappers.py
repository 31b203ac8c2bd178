"""Composable decorators around a client's ``request`` method.

Each wrapper takes anything with ``request(method, path, body, query)`` and
``options`` (the core client or another wrapper) and exposes the same surface,
so they stack:

    client = CachingClient(RateLimitedClient(AgentPlatformClient(api_key=...)))
    client.agents.get("agent_123")
"""

from __future__ import annotations

import copy
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Protocol
from urllib.parse import urlencode

from agent_platform_sdk.agents import AgentClient
from agent_platform_sdk.config import ClientOptions, DEFAULT_RATE_LIMIT
from agent_platform_sdk.exceptions import RateLimitError
from agent_platform_sdk.logging import get_logger
from agent_platform_sdk.models import ApiResponse
from agent_platform_sdk.resources import ResourceClient
from agent_platform_sdk.tasks import TaskClient

log = get_logger()

_DEFAULT_CACHE_TTL_SECONDS = 60.0
_DEFAULT_CACHE_MAX_ENTRIES = 1024
_FALLBACK_RETRY_AFTER_SECONDS = 1.0
_TASK_SPAWNING_SUFFIX = "/execute"


class RequestClient(Protocol):
    """Anything that can dispatch an API call."""

    @property
    def options(self) -> ClientOptions: ...

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: dict[str, Any] | None = None,
    ) -> ApiResponse[Any]: ...

    def sleep(self, seconds: float) -> None: ...

    def monotonic(self) -> float: ...

    def close(self) -> None: ...


class ClientWrapper:
    """Pass-through wrapper; subclasses override ``request``."""

    def __init__(self, inner: RequestClient) -> None:
        self._inner = inner
        self.agents = AgentClient(self)
        self.tasks = TaskClient(self)
        self.items = ResourceClient(self, "/items")

    @property
    def inner(self) -> RequestClient:
        return self._inner

    @property
    def options(self) -> ClientOptions:
        return self._inner.options

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: dict[str, Any] | None = None,
    ) -> ApiResponse[Any]:
        return self._inner.request(method, path, body=body, query=query)

    def resource(self, path: str) -> ResourceClient:
        return ResourceClient(self, path)

    def get_data(self, path: str, **params: Any) -> Any:
        return self.request("GET", path, query=params).data

    def sleep(self, seconds: float) -> None:
        self._inner.sleep(seconds)

    def monotonic(self) -> float:
        return self._inner.monotonic()

    def close(self) -> None:
        self._inner.close()

    def __enter__(self) -> ClientWrapper:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# --- TTL cache ---


@dataclass
class _CacheEntry:
    response: ApiResponse[Any]
    expires_at: float


def _cache_key(path: str, query: dict[str, Any] | None) -> str:
    if not query:
        return path
    parts = urlencode(sorted((k, str(v)) for k, v in query.items() if v is not None))
    return f"{path}?{parts}" if parts else path


class CachingClient(ClientWrapper):
    """Caches successful GET responses for ``ttl_seconds``.

    Any write (POST/PUT/PATCH/DELETE) drops cached entries under the written
    collection, so a read after a write never returns the stale resource.
    Executing an agent also drops cached task listings. Callers get copies of
    cached responses.
    """

    def __init__(
        self,
        inner: RequestClient,
        ttl_seconds: float = _DEFAULT_CACHE_TTL_SECONDS,
        max_entries: int = _DEFAULT_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(inner)
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: dict[str, Any] | None = None,
    ) -> ApiResponse[Any]:
        if method.upper() != "GET":
            response = self._inner.request(method, path, body=body, query=query)
            self.invalidate(path)
            if path.rstrip("/").endswith(_TASK_SPAWNING_SUFFIX):
                self.invalidate(TaskClient.collection_path)
            return response

        key = _cache_key(path, query)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at > now:
                self.hits += 1
                return copy.deepcopy(entry.response)
            self.misses += 1

        response = self._inner.request(method, path, body=body, query=query)
        with self._lock:
            if len(self._entries) >= self._max_entries:
                self._evict(now)
            self._entries[key] = _CacheEntry(response=copy.deepcopy(response), expires_at=now + self._ttl)
        return response

    def _evict(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for k in expired:
            del self._entries[k]
        if len(self._entries) >= self._max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k].expires_at)
            del self._entries[oldest]

    def invalidate(self, path: str | None = None) -> int:
        """Drop cached entries for ``path`` and its parent collection (or everything)."""
        with self._lock:
            if path is None:
                count = len(self._entries)
                self._entries.clear()
                return count
            path = "/" + path.strip("/")
            prefixes = {path}
            parent = path.rsplit("/", 1)[0]
            if parent:
                prefixes.add(parent)
            stale = [
                k for k in self._entries
                if any(k == p or k.startswith(p + "/") or k.startswith(p + "?") for p in prefixes)
            ]
            for k in stale:
                del self._entries[k]
        if stale:
            log.debug("cache_invalidated", path=path, entries=len(stale))
        return len(stale)

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)


# --- Client-side rate limiting ---


class RateLimitedClient(ClientWrapper):
    """Sliding-window limiter: at most ``max_requests`` per ``period_seconds``.

    With ``block=True`` a request waits for a free slot; otherwise it fails
    immediately with RateLimitError carrying the wait time as ``retry_after``.
    """

    def __init__(
        self,
        inner: RequestClient,
        max_requests: int = DEFAULT_RATE_LIMIT,
        period_seconds: float = 3600.0,
        block: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        super().__init__(inner)
        self._max_requests = max_requests
        self._period = period_seconds
        self._block = block
        self._clock = clock
        self._sent: deque[float] = deque()
        self._lock = threading.Lock()

    def _reserve(self) -> float:
        """Claim a slot; return 0 on success or the seconds until one frees up."""
        with self._lock:
            now = self._clock()
            while self._sent and self._sent[0] <= now - self._period:
                self._sent.popleft()
            if len(self._sent) < self._max_requests:
                self._sent.append(now)
                return 0.0
            return self._sent[0] + self._period - now

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: dict[str, Any] | None = None,
    ) -> ApiResponse[Any]:
        while True:
            wait = self._reserve()
            if wait <= 0:
                break
            if not self._block:
                raise RateLimitError(
                    f"client-side limit of {self._max_requests} requests per {self._period:.0f}s reached",
                    retry_after=wait,
                )
            log.info("rate_limit_wait", path=path, wait_seconds=round(wait, 3))
            self.sleep(wait)
        return self._inner.request(method, path, body=body, query=query)

    @property
    def remaining(self) -> int:
        with self._lock:
            now = self._clock()
            active = sum(1 for t in self._sent if t > now - self._period)
            return max(0, self._max_requests - active)


# --- Retry after 429 ---


class RateLimitRetryClient(ClientWrapper):
    """On RATE_LIMITED, wait ``retry_after`` seconds and retry the call once."""

    def __init__(
        self,
        inner: RequestClient,
        fallback_retry_after: float = _FALLBACK_RETRY_AFTER_SECONDS,
        max_wait_seconds: float = 300.0,
    ) -> None:
        super().__init__(inner)
        self._fallback = fallback_retry_after
        self._max_wait = max_wait_seconds

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: dict[str, Any] | None = None,
    ) -> ApiResponse[Any]:
        try:
            return self._inner.request(method, path, body=body, query=query)
        except RateLimitError as e:
            wait = e.retry_after if e.retry_after is not None else self._fallback
            if wait > self._max_wait:
                raise
            log.warning("rate_limited_retry", method=method, path=path, retry_after=wait)
            self.sleep(wait)
        return self._inner.request(method, path, body=body, query=query)
