"""Caller-owned registry of clients keyed by API key."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Callable

from agent_platform_sdk.client import AgentPlatformClient
from agent_platform_sdk.config import ClientOptions
from agent_platform_sdk.logging import get_logger

log = get_logger()

ClientFactory = Callable[[ClientOptions], AgentPlatformClient]


class ConnectionRegistry:
    """Reuses one client per API key for as long as the registry lives.

    The registry is an ordinary object: create it where clients are needed and
    close it when done. Nothing is shared at module level.
    """

    def __init__(
        self,
        base_options: ClientOptions | None = None,
        factory: ClientFactory | None = None,
    ) -> None:
        self._base = base_options or ClientOptions()
        self._factory: ClientFactory = factory or (lambda opts: AgentPlatformClient(opts))
        self._clients: dict[str, AgentPlatformClient] = {}
        self._lock = threading.RLock()

    def get(self, api_key: str, **overrides: Any) -> AgentPlatformClient:
        """Return the client for ``api_key``, creating it on first use.

        ``overrides`` apply only when the client is first created.
        """
        if not api_key:
            raise ValueError("api_key must not be empty")
        with self._lock:
            client = self._clients.get(api_key)
            if client is None:
                options = replace(self._base, api_key=api_key, bearer_token=None, **overrides)
                client = self._factory(options)
                self._clients[api_key] = client
                log.info("client_created", clients=len(self._clients))
            return client

    def remove(self, api_key: str) -> bool:
        """Close and forget the client for ``api_key``."""
        with self._lock:
            client = self._clients.pop(api_key, None)
        if client is None:
            return False
        client.close()
        return True

    def close(self) -> None:
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()

    def __contains__(self, api_key: object) -> bool:
        with self._lock:
            return api_key in self._clients

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def __enter__(self) -> ConnectionRegistry:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
