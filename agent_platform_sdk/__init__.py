"""Agent Platform SDK: typed HTTP client for the Agent Platform API."""

__version__ = "0.1.0"

from agent_platform_sdk.client import AgentPlatformClient
from agent_platform_sdk.config import ClientOptions
from agent_platform_sdk.connections import ConnectionRegistry
from agent_platform_sdk.exceptions import (
    AgentPlatformError,
    ApiStatusError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    NotFoundError,
    PaginationError,
    RateLimitError,
    ServerError,
    TaskTimeoutError,
    TransportError,
    ValidationError,
)
from agent_platform_sdk.models import Agent, ApiError, ApiResponse, Page, RateLimitInfo, Task, TaskStatus
from agent_platform_sdk.pagination import collect_all, iter_items, iter_pages
from agent_platform_sdk.wrappers import CachingClient, RateLimitedClient, RateLimitRetryClient

__all__ = [
    "AgentPlatformClient",
    "ClientOptions",
    "ConnectionRegistry",
    "CachingClient",
    "RateLimitedClient",
    "RateLimitRetryClient",
    "iter_pages",
    "iter_items",
    "collect_all",
    "Agent",
    "ApiError",
    "ApiResponse",
    "Page",
    "RateLimitInfo",
    "Task",
    "TaskStatus",
    "AgentPlatformError",
    "ApiStatusError",
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "NotFoundError",
    "PaginationError",
    "RateLimitError",
    "ServerError",
    "TaskTimeoutError",
    "TransportError",
    "ValidationError",
]
