"""
Task lifecycle: creation, assignment and status transitions.

`status` and `completed` are stored side by side so either can be queried,
and every write that touches one of them writes both in the same UPDATE.
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from taskhub.core.database import Collection, IExact
from taskhub.core.errors import Internal, InvalidId, NotFound
from taskhub.schemas.task import TaskStatus

logger = logging.getLogger(__name__)


def new_task_id() -> str:
    return uuid.uuid4().hex


def parse_task_id(task_id: str) -> str:
    """Normalise a task id to 32 lowercase hex chars, or raise InvalidId."""
    try:
        return uuid.UUID(hex=task_id).hex
    except (TypeError, ValueError):
        raise InvalidId()


def _dedupe(values: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for value in values:
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


def _normalise_status(task: Dict[str, Any]) -> Dict[str, Any]:
    # Stored casing may differ from the enum value, e.g. "in progress"
    status = TaskStatus.lookup(task["status"])
    if status is not None:
        task["status"] = status.value
    return task


class TaskService:
    def __init__(self, tasks: Collection):
        self.tasks = tasks

    async def create(self, title: str, description: str) -> Dict[str, Any]:
        document = {
            "id": new_task_id(),
            "title": title,
            "description": description,
            "assigned_to": [],
            "assigned_by": None,
            "status": TaskStatus.pending.value,
            "completed": False,
        }
        try:
            task = await self.tasks.insert_one(document)
        except SQLAlchemyError:
            logger.exception("Failed to create task")
            raise Internal("Failed to create task")
        logger.info("Created task %s", task["id"])
        return task

    async def get(self, task_id: str) -> Dict[str, Any]:
        task_id = parse_task_id(task_id)
        try:
            task = await self.tasks.find_one({"id": task_id})
        except SQLAlchemyError:
            logger.exception("Failed to load task %s", task_id)
            raise Internal("Failed to get task")
        if task is None:
            raise NotFound()
        return _normalise_status(task)

    async def assign(self, task_id: str, assigned_to: Iterable[str], assigned_by: str) -> Dict[str, Any]:
        """
        Set the assignees and re-open the task.

        Assignment always puts the task back to Pending, including tasks that
        were already completed.
        """
        task_id = parse_task_id(task_id)
        assignees = _dedupe(assigned_to)
        values = {
            "assigned_to": assignees,
            "assigned_by": assigned_by,
            "status": TaskStatus.pending.value,
            "completed": False,
        }
        await self._update(task_id, values, "Failed to assign task")
        logger.info("Assigned task %s to %s by %s", task_id, assignees, assigned_by)
        return {"assigned_to": assignees, "assigned_by": assigned_by}

    async def update_status(self, task_id: str, status) -> Dict[str, Any]:
        task_id = parse_task_id(task_id)
        new_status = TaskStatus.parse(status)
        completed = new_status.is_completed
        await self._update(
            task_id,
            {"status": new_status.value, "completed": completed},
            "Failed to update task status",
        )
        logger.info("Task %s is now %s", task_id, new_status.value)
        return {"status": new_status, "completed": completed}

    async def list(self, status: Optional[TaskStatus] = None) -> List[Dict[str, Any]]:
        filter = {}
        if status is not None:
            filter["status"] = IExact(TaskStatus.parse(status).value)
        try:
            tasks = await self.tasks.find(filter)
        except SQLAlchemyError:
            logger.exception("Failed to list tasks (status=%s)", status)
            raise Internal("Failed to get tasks")
        return [_normalise_status(task) for task in tasks]

    async def _update(self, task_id: str, values: Dict[str, Any], failure: str) -> None:
        try:
            matched = await self.tasks.update_one({"id": task_id}, values)
        except SQLAlchemyError:
            logger.exception("%s: %s", failure, task_id)
            raise Internal(failure)
        if matched == 0:
            raise NotFound()
