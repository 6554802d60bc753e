from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from taskhub.core.errors import InvalidStatus


class TaskStatus(str, Enum):
    pending = "Pending"
    in_progress = "In Progress"
    completed = "Completed"

    @classmethod
    def parse(cls, value) -> "TaskStatus":
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        raise InvalidStatus()

    @classmethod
    def lookup(cls, value: str) -> Optional["TaskStatus"]:
        """Case-insensitive match for values read back from storage."""
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None

    @property
    def is_completed(self) -> bool:
        return self is TaskStatus.completed


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(CamelModel):
    title: str
    description: str = ""


class TaskAssignment(CamelModel):
    assigned_to: List[str] = []
    assigned_by: str = ""


class TaskStatusUpdate(CamelModel):
    # Free-form here; TaskStatus.parse decides validity
    status: str


class TaskResponse(CamelModel):
    id: str
    title: str
    description: str
    assigned_to: List[str] = []
    assigned_by: Optional[str] = None
    status: TaskStatus
    completed: bool
    created_at: Optional[datetime] = None


class TaskCreated(CamelModel):
    message: str
    task: TaskResponse


class TaskList(CamelModel):
    tasks: List[TaskResponse]


class AssignmentResult(CamelModel):
    message: str
    assigned_to: List[str]
    assigned_by: str


class StatusResult(CamelModel):
    message: str
    status: TaskStatus
    completed: bool
