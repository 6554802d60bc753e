from fastapi import APIRouter, Depends, status

from taskhub.core.dependencies import get_task_service
from taskhub.schemas.task import (
    AssignmentResult,
    StatusResult,
    TaskAssignment,
    TaskCreate,
    TaskCreated,
    TaskList,
    TaskStatus,
    TaskStatusUpdate,
)
from taskhub.services.task_service import TaskService

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


@router.post("", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
async def create_task(task_in: TaskCreate, service: TaskService = Depends(get_task_service)):
    task = await service.create(task_in.title, task_in.description)
    return {"message": "Task created", "task": task}


@router.get("", response_model=TaskList)
async def get_tasks(service: TaskService = Depends(get_task_service)):
    return {"tasks": await service.list()}


@router.get("/completed", response_model=TaskList)
async def get_completed_tasks(service: TaskService = Depends(get_task_service)):
    return {"tasks": await service.list(TaskStatus.completed)}


@router.get("/in-progress", response_model=TaskList)
async def get_in_progress_tasks(service: TaskService = Depends(get_task_service)):
    return {"tasks": await service.list(TaskStatus.in_progress)}


@router.get("/pending", response_model=TaskList)
async def get_pending_tasks(service: TaskService = Depends(get_task_service)):
    return {"tasks": await service.list(TaskStatus.pending)}


@router.put("/{task_id}/assign", response_model=AssignmentResult)
async def assign_task(
    task_id: str,
    assignment: TaskAssignment,
    service: TaskService = Depends(get_task_service),
):
    result = await service.assign(task_id, assignment.assigned_to, assignment.assigned_by)
    return {"message": "Task assigned", **result}


@router.put("/{task_id}/status", response_model=StatusResult)
async def update_task_status(
    task_id: str,
    update: TaskStatusUpdate,
    service: TaskService = Depends(get_task_service),
):
    result = await service.update_status(task_id, update.status)
    return {"message": "Task status updated", **result}
