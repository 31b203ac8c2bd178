"""Tests for generic item methods and the agents/tasks clients."""

import pytest

from agent_platform_sdk.exceptions import NotFoundError, TaskTimeoutError
from agent_platform_sdk.models import Agent, Task

from tests.conftest import envelope, error_envelope


class TestItems:
    def test_create_item_returns_created_object(self, client, api):
        api.add("POST", "/items", (201, envelope({"id": "item_123", "name": "Test Item"})))
        item = client.items.create_item({"name": "Test Item"})
        assert item["id"] == "item_123"
        assert api.json_body() == {"name": "Test Item"}

    def test_get_items_serializes_params_and_caps_limit(self, client, api):
        many = [{"id": f"item_{i}"} for i in range(25)]
        api.add("GET", "/items", (200, envelope(many)))
        items = client.items.get_items(category="example", limit=20)
        params = api.requests[0].url.params
        assert params["category"] == "example"
        assert params["limit"] == "20"
        assert len(items) == 20

    def test_get_item(self, client, api):
        api.add("GET", "/items/item_1", (200, envelope({"id": "item_1"})))
        assert client.items.get_item("item_1") == {"id": "item_1"}

    def test_update_item_uses_put(self, client, api):
        api.add("PUT", "/items/item_1", (200, envelope({"id": "item_1", "name": "new"})))
        assert client.items.update_item("item_1", {"name": "new"})["name"] == "new"
        assert api.requests[0].method == "PUT"

    def test_delete_item(self, client, api):
        api.add("DELETE", "/items/item_1", (200, envelope(None)))
        assert client.items.delete_item("item_1") is True

    def test_ids_are_path_escaped(self, client, api):
        api.add("GET", "/items/a/b", (200, envelope({"id": "a/b"})))
        client.items.get_item("a/b")
        assert api.requests[0].url.raw_path == b"/v1/items/a%2Fb"

    def test_empty_id_rejected(self, client, api):
        with pytest.raises(ValueError):
            client.items.get_item("")
        assert api.requests == []

    def test_custom_resource_path(self, client, api):
        api.add("GET", "/datasets", (200, envelope([{"id": "d1"}])))
        assert client.resource("datasets/").get_items() == [{"id": "d1"}]

    def test_get_data(self, client, api):
        api.add("GET", "/stats", (200, envelope({"agents": 3})))
        assert client.get_data("/stats", window="24h") == {"agents": 3}
        assert api.requests[0].url.params["window"] == "24h"


class TestAgents:
    def test_list_returns_typed_page(self, client, api):
        api.add("GET", "/agents", (200, envelope([{"id": "a1", "name": "bot"}], next_cursor="c2")))
        page = client.agents.list(limit=10)
        assert isinstance(page.items[0], Agent)
        assert page.items[0].name == "bot"
        assert page.next_cursor == "c2"
        assert page.has_more

    def test_create(self, client, api):
        api.add("POST", "/agents", (201, envelope({"id": "a1", "name": "research-bot", "status": "active"})))
        agent = client.agents.create({"name": "research-bot"})
        assert agent.id == "a1"
        assert agent.status == "active"

    def test_get_parses_timestamps(self, client, api):
        api.add("GET", "/agents/a1", (200, envelope({"id": "a1", "createdAt": "2024-01-01T00:00:00Z"})))
        assert client.agents.get("a1").created_at == "2024-01-01T00:00:00Z"

    def test_get_missing(self, client, api):
        api.add("GET", "/agents/nope", (404, error_envelope("NOT_FOUND", "agent not found")))
        with pytest.raises(NotFoundError, match="agent not found"):
            client.agents.get("nope")

    def test_update(self, client, api):
        api.add("PUT", "/agents/a1", (200, envelope({"id": "a1", "name": "renamed"})))
        assert client.agents.update("a1", {"name": "renamed"}).name == "renamed"
        assert api.json_body() == {"name": "renamed"}

    def test_delete(self, client, api):
        api.add("DELETE", "/agents/a1", (200, envelope(None)))
        assert client.agents.delete("a1") is True

    def test_execute(self, client, api):
        api.add("POST", "/agents/a1/execute", (202, envelope({"id": "t1", "status": "pending"})))
        task = client.agents.execute("a1", {"input": "summarise"})
        assert isinstance(task, Task)
        assert task.id == "t1"
        assert task.agent_id == "a1"
        assert api.json_body() == {"input": "summarise"}


class TestTasks:
    def test_create(self, client, api):
        api.add("POST", "/tasks", (201, envelope({"id": "t1", "agentId": "a1", "status": "pending"})))
        task = client.tasks.create({"agentId": "a1", "input": "go"})
        assert task.agent_id == "a1"
        assert not task.is_terminal

    def test_get_status(self, client, api):
        api.add("GET", "/tasks/t1", (200, envelope({"id": "t1", "status": "completed", "result": "done"})))
        task = client.tasks.get("t1")
        assert task.is_terminal
        assert task.result == "done"

    def test_list_with_filters(self, client, api):
        api.add("GET", "/tasks", (200, envelope([{"id": "t1", "status": "running"}])))
        page = client.tasks.list(status="running", limit=5)
        assert page.items[0].status == "running"
        assert api.requests[0].url.params["status"] == "running"

    def test_error_object_flattened(self, client, api):
        api.add("GET", "/tasks/t1", (200, envelope({"id": "t1", "status": "failed", "error": {"message": "tool crashed"}})))
        assert client.tasks.get("t1").error == "tool crashed"

    def test_wait_polls_until_terminal(self, client, api, sleeps):
        api.add(
            "GET", "/tasks/t1",
            (200, envelope({"id": "t1", "status": "pending"})),
            (200, envelope({"id": "t1", "status": "running"})),
            (200, envelope({"id": "t1", "status": "completed", "result": 42})),
        )
        task = client.tasks.wait("t1", interval=0.5, timeout=60)
        assert task.result == 42
        assert sleeps == [0.5, 0.5]

    def test_wait_returns_failed_task(self, client, api):
        api.add("GET", "/tasks/t1", (200, envelope({"id": "t1", "status": "failed", "error": "boom"})))
        assert client.tasks.wait("t1").status == "failed"

    def test_wait_times_out(self, client, api):
        api.add("GET", "/tasks/t1", (200, envelope({"id": "t1", "status": "running"})))
        with pytest.raises(TaskTimeoutError):
            client.tasks.wait("t1", interval=5, timeout=1)

    def test_wait_deadline_follows_client_clock(self, client, api, sleeps):
        api.add("GET", "/tasks/t1", (200, envelope({"id": "t1", "status": "running"})))
        with pytest.raises(TaskTimeoutError):
            client.tasks.wait("t1", interval=1, timeout=3)
        assert sleeps == [1, 1, 1]
        assert len(api.requests) == 4
