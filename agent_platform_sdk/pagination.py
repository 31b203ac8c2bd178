"""Cursor pagination helpers."""

from __future__ import annotations

from typing import Any, Callable, Iterator

from agent_platform_sdk.config import DEFAULT_MAX_PAGES
from agent_platform_sdk.exceptions import PaginationError
from agent_platform_sdk.logging import get_logger
from agent_platform_sdk.models import ApiResponse

log = get_logger()

PageFetcher = Callable[..., ApiResponse[Any]]


def page_items(data: Any) -> list[Any]:
    """Extract the item list from a page's ``data``."""
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    raise PaginationError(f"page data is not a list: {type(data).__name__}")


def iter_pages(
    fetch: PageFetcher,
    *,
    limit: int | None = None,
    max_pages: int = DEFAULT_MAX_PAGES,
    **params: Any,
) -> Iterator[ApiResponse[Any]]:
    """Yield pages from ``fetch(cursor=..., limit=..., **params)`` until the cursor runs out.

    Stops with PaginationError after ``max_pages`` pages, or when the server
    hands back a cursor it already returned, instead of looping forever.
    """
    cursor: str | None = None
    seen: set[str] = set()
    pages = 0
    while True:
        if pages >= max_pages:
            raise PaginationError(
                f"pagination exceeded {max_pages} pages",
                details={"cursor": cursor, "pages": pages},
            )
        response = fetch(cursor=cursor, limit=limit, **params)
        pages += 1
        yield response

        cursor = response.next_cursor
        if not cursor:
            log.debug("pagination_complete", pages=pages)
            return
        if cursor in seen:
            raise PaginationError(
                "pagination cursor did not advance",
                details={"cursor": cursor, "pages": pages},
            )
        seen.add(cursor)


def iter_items(fetch: PageFetcher, **kwargs: Any) -> Iterator[Any]:
    """Yield every item across all pages, in page order."""
    for page in iter_pages(fetch, **kwargs):
        yield from page_items(page.data)


def collect_all(fetch: PageFetcher, **kwargs: Any) -> list[Any]:
    return list(iter_items(fetch, **kwargs))
