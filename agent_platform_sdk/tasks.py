"""Task submission and status client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from agent_platform_sdk.exceptions import TaskTimeoutError
from agent_platform_sdk.logging import get_logger
from agent_platform_sdk.models import Page, Task
from agent_platform_sdk.resources import ResourceClient

if TYPE_CHECKING:
    from agent_platform_sdk.client import AgentPlatformClient

log = get_logger()


class TaskClient(ResourceClient):
    """Client for task creation and status polling."""

    model = staticmethod(Task.from_dict)
    collection_path = "/tasks"

    def __init__(self, core: AgentPlatformClient) -> None:
        super().__init__(core, self.collection_path)

    def list(self, cursor: str | None = None, limit: int | None = None, **params: Any) -> Page[Task]:
        return self.list_page(cursor=cursor, limit=limit, **params)

    def create(self, payload: dict[str, Any]) -> Task:
        return self.create_item(payload)

    def get(self, task_id: str) -> Task:
        return self.get_item(task_id)

    def wait(
        self,
        task_id: str,
        interval: float = 2.0,
        timeout: float = 300.0,
    ) -> Task:
        """Poll a task until it reaches a terminal status.

        Raises TaskTimeoutError if the task is still running after ``timeout``
        seconds. Failed tasks are returned, not raised.
        """
        deadline = self._core.monotonic() + timeout
        while True:
            task = self.get(task_id)
            if task.is_terminal:
                log.info("task_finished", task_id=task_id, status=task.status)
                return task
            if self._core.monotonic() + interval > deadline:
                raise TaskTimeoutError(
                    f"task {task_id} still {task.status} after {timeout}s",
                    details={"task_id": task_id, "status": task.status},
                )
            self._core.sleep(interval)
