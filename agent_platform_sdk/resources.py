"""Generic CRUD methods over a REST collection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator
from urllib.parse import quote

from agent_platform_sdk.models import ApiResponse, Page
from agent_platform_sdk.pagination import iter_items, page_items

if TYPE_CHECKING:
    from agent_platform_sdk.client import AgentPlatformClient


class ResourceClient:
    """CRUD client for one collection endpoint (e.g. ``/items``).

    Payloads are passed through to the API as given; the server validates them.
    Subclasses set ``model`` to turn raw dicts into typed objects.
    """

    model: Callable[[dict[str, Any]], Any] | None = None

    def __init__(self, core: AgentPlatformClient, path: str) -> None:
        self._core = core
        self._path = "/" + path.strip("/")

    @property
    def path(self) -> str:
        return self._path

    def _item_path(self, item_id: str) -> str:
        if not item_id or not str(item_id).strip():
            raise ValueError("item id must not be empty")
        return f"{self._path}/{quote(str(item_id), safe='')}"

    def _wrap(self, data: Any) -> Any:
        if self.model is not None and isinstance(data, dict):
            return self.model(data)
        return data

    # --- Reads ---

    def fetch_page(
        self,
        cursor: str | None = None,
        limit: int | None = None,
        **params: Any,
    ) -> ApiResponse[Any]:
        query = dict(params, cursor=cursor, limit=limit)
        return self._core.request("GET", self._path, query=query)

    def list_page(self, cursor: str | None = None, limit: int | None = None, **params: Any) -> Page[Any]:
        response = self.fetch_page(cursor=cursor, limit=limit, **params)
        items = page_items(response.data)
        if limit is not None:
            items = items[:limit]
        return Page(items=[self._wrap(i) for i in items], next_cursor=response.next_cursor)

    def get_items(self, limit: int | None = None, cursor: str | None = None, **params: Any) -> list[Any]:
        """Fetch one page of the collection; never returns more than ``limit`` items."""
        return self.list_page(cursor=cursor, limit=limit, **params).items

    def iter_all(self, limit: int | None = None, **params: Any) -> Iterator[Any]:
        """Iterate every item across all pages."""
        for item in iter_items(
            self.fetch_page,
            limit=limit,
            max_pages=self._core.options.max_pages,
            **params,
        ):
            yield self._wrap(item)

    def list_all(self, limit: int | None = None, **params: Any) -> list[Any]:
        return list(self.iter_all(limit=limit, **params))

    def get_item(self, item_id: str) -> Any:
        return self._wrap(self._core.request("GET", self._item_path(item_id)).data)

    # --- Writes ---

    def create_item(self, payload: dict[str, Any]) -> Any:
        return self._wrap(self._core.request("POST", self._path, body=payload).data)

    def update_item(self, item_id: str, payload: dict[str, Any]) -> Any:
        return self._wrap(self._core.request("PUT", self._item_path(item_id), body=payload).data)

    def delete_item(self, item_id: str) -> bool:
        return self._core.request("DELETE", self._item_path(item_id)).success
