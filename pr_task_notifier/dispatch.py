from __future__ import annotations

import dataclasses
import typing

import httpx
from rich.markup import escape

from pr_task_notifier import console


if typing.TYPE_CHECKING:
    from collections import abc

    from pr_task_notifier.tasks import TaskId


TASK_COMMENTS_PATH = "/rest/private/tasks/comments/{task_id}"


def wrap_comment(html: str) -> str:
    return f"<p>{html}</p>"


@dataclasses.dataclass(frozen=True)
class DeliveryOutcome:
    task_id: TaskId
    status_code: int | None = None
    error: str | None = None

    @property
    def delivered(self) -> bool:
        return self.error is None


@dataclasses.dataclass
class Dispatcher:
    client: httpx.AsyncClient

    async def deliver_one(self, html: str, task_id: TaskId) -> DeliveryOutcome:
        console.log(f"Commenting to Task #{task_id}...")
        try:
            response = await self.client.post(
                TASK_COMMENTS_PATH.format(task_id=task_id),
                content=wrap_comment(html).encode(),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            console.log(
                f"Failed to post comment to task {task_id}: {escape(str(e))}",
                style="red",
            )
            status_code = None
            if isinstance(e, httpx.HTTPStatusError):
                status_code = e.response.status_code
            return DeliveryOutcome(task_id, status_code=status_code, error=str(e))

        console.log(f"Status code: {response.status_code}")
        return DeliveryOutcome(task_id, status_code=response.status_code)

    async def deliver(
        self,
        html: str,
        task_ids: abc.Iterable[TaskId],
    ) -> list[DeliveryOutcome]:
        return [await self.deliver_one(html, task_id) for task_id in task_ids]
