# backend/tests/test_task_service.py

from __future__ import annotations

import uuid

import pytest

from taskhub.core.errors import InvalidId, InvalidStatus, NotFound
from taskhub.schemas.task import TaskStatus
from taskhub.services.task_service import TaskService, parse_task_id


def test_status_parse_accepts_only_exact_values() -> None:
    assert TaskStatus.parse("Pending") is TaskStatus.pending
    assert TaskStatus.parse("In Progress") is TaskStatus.in_progress
    assert TaskStatus.parse("Completed") is TaskStatus.completed
    assert TaskStatus.parse(TaskStatus.completed) is TaskStatus.completed

    for bogus in ("Bogus", "completed", "InProgress", "", None):
        with pytest.raises(InvalidStatus):
            TaskStatus.parse(bogus)


def test_parse_task_id_rejects_malformed_ids() -> None:
    task_id = uuid.uuid4().hex
    assert parse_task_id(task_id.upper()) == task_id

    for bogus in ("not-an-id", "123", "", None):
        with pytest.raises(InvalidId):
            parse_task_id(bogus)


@pytest.mark.asyncio
async def test_create_starts_pending_and_unassigned(task_service: TaskService) -> None:
    task = await task_service.create("T", "D")

    assert len(task["id"]) == 32
    assert task["title"] == "T"
    assert task["description"] == "D"
    assert task["status"] == "Pending"
    assert task["completed"] is False
    assert task["assigned_to"] == []
    assert task["assigned_by"] is None

    stored = await task_service.get(task["id"])
    assert stored["status"] == "Pending"


@pytest.mark.asyncio
async def test_completed_tracks_status_after_every_update(task_service: TaskService) -> None:
    task = await task_service.create("T", "D")

    for status in ("In Progress", "Completed", "Pending", "Completed", "In Progress"):
        result = await task_service.update_status(task["id"], status)
        stored = await task_service.get(task["id"])

        assert result["status"].value == status
        assert result["completed"] == (status == "Completed")
        assert stored["status"] == status
        assert stored["completed"] == (status == "Completed")


@pytest.mark.asyncio
async def test_update_status_errors(task_service: TaskService) -> None:
    task = await task_service.create("T", "D")

    with pytest.raises(InvalidStatus):
        await task_service.update_status(task["id"], "Bogus")
    with pytest.raises(InvalidId):
        await task_service.update_status("nope", "Completed")
    with pytest.raises(InvalidId):
        await task_service.update_status("nope", "Bogus")
    with pytest.raises(NotFound):
        await task_service.update_status(uuid.uuid4().hex, "Completed")

    # Rejected updates leave the task untouched
    stored = await task_service.get(task["id"])
    assert stored["status"] == "Pending"


@pytest.mark.asyncio
async def test_assign_reopens_completed_task(task_service: TaskService) -> None:
    task = await task_service.create("T", "D")
    await task_service.update_status(task["id"], "Completed")

    result = await task_service.assign(task["id"], ["u1", "u2"], "boss")
    assert result == {"assigned_to": ["u1", "u2"], "assigned_by": "boss"}

    stored = await task_service.get(task["id"])
    assert stored["assigned_to"] == ["u1", "u2"]
    assert stored["assigned_by"] == "boss"
    assert stored["status"] == "Pending"
    assert stored["completed"] is False


@pytest.mark.asyncio
async def test_repeated_assignment_is_idempotent(task_service: TaskService) -> None:
    task = await task_service.create("T", "D")

    await task_service.assign(task["id"], ["u1", "u1", "u2"], "boss")
    first = await task_service.get(task["id"])
    await task_service.assign(task["id"], ["u1", "u2"], "boss")
    second = await task_service.get(task["id"])

    assert first == second
    assert second["assigned_to"] == ["u1", "u2"]


@pytest.mark.asyncio
async def test_assign_errors(task_service: TaskService) -> None:
    with pytest.raises(InvalidId):
        await task_service.assign("zzz", ["u1"], "boss")
    with pytest.raises(NotFound):
        await task_service.assign(uuid.uuid4().hex, ["u1"], "boss")


@pytest.mark.asyncio
async def test_list_empty_is_a_list(task_service: TaskService) -> None:
    assert await task_service.list() == []
    assert await task_service.list(TaskStatus.completed) == []


@pytest.mark.asyncio
async def test_status_filters_partition_the_full_list(task_service: TaskService) -> None:
    statuses = ["Pending", "In Progress", "Completed", "Completed", "In Progress"]
    for i, status in enumerate(statuses):
        task = await task_service.create(f"T{i}", "D")
        await task_service.update_status(task["id"], status)

    everything = await task_service.list()
    by_status = {status: await task_service.list(status) for status in TaskStatus}

    assert len(everything) == len(statuses)
    for status, tasks in by_status.items():
        assert all(task["status"] == status.value for task in tasks)
        assert len(tasks) == statuses.count(status.value)

    union = sorted(task["id"] for tasks in by_status.values() for task in tasks)
    assert union == sorted(task["id"] for task in everything)


@pytest.mark.asyncio
async def test_status_filter_is_case_insensitive(task_service: TaskService, database) -> None:
    # Rows written by older clients may carry a different casing
    task = await task_service.create("T", "D")
    await database.tasks.update_one({"id": task["id"]}, {"status": "in progress"})

    tasks = await task_service.list(TaskStatus.in_progress)
    assert [t["id"] for t in tasks] == [task["id"]]
    assert tasks[0]["status"] == "In Progress"
    assert (await task_service.get(task["id"]))["status"] == "In Progress"
    assert TaskStatus.lookup("COMPLETED") is TaskStatus.completed
    assert TaskStatus.lookup("Bogus") is None
