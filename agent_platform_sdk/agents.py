"""Agent management client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from agent_platform_sdk.models import Agent, Page, Task
from agent_platform_sdk.resources import ResourceClient

if TYPE_CHECKING:
    from agent_platform_sdk.client import AgentPlatformClient


class AgentClient(ResourceClient):
    """Client for agent CRUD and execution."""

    model = staticmethod(Agent.from_dict)

    def __init__(self, core: AgentPlatformClient) -> None:
        super().__init__(core, "/agents")

    def list(self, cursor: str | None = None, limit: int | None = None, **params: Any) -> Page[Agent]:
        return self.list_page(cursor=cursor, limit=limit, **params)

    def get(self, agent_id: str) -> Agent:
        return self.get_item(agent_id)

    def create(self, payload: dict[str, Any]) -> Agent:
        return self.create_item(payload)

    def update(self, agent_id: str, payload: dict[str, Any]) -> Agent:
        return self.update_item(agent_id, payload)

    def delete(self, agent_id: str) -> bool:
        return self.delete_item(agent_id)

    def execute(self, agent_id: str, payload: dict[str, Any]) -> Task:
        """Start a task on an agent. Returns the task as accepted by the server."""
        resp = self._core.request("POST", f"{self._item_path(agent_id)}/execute", body=payload)
        data = resp.data if isinstance(resp.data, dict) else {}
        task = Task.from_dict(data)
        if not task.agent_id:
            task.agent_id = agent_id
        return task
