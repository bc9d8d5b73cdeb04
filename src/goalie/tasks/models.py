"""Task data models."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    """Task progress status."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Interactive toggle order
_STATUS_CYCLE = {
    TaskStatus.TODO: TaskStatus.IN_PROGRESS,
    TaskStatus.IN_PROGRESS: TaskStatus.COMPLETED,
    TaskStatus.COMPLETED: TaskStatus.TODO,
}


def next_status(status: TaskStatus) -> TaskStatus:
    """Return the status that follows ``status`` in todo -> in_progress -> completed -> todo."""
    return _STATUS_CYCLE[TaskStatus(status)]


def to_date(value: Any) -> Optional[date]:
    """
    Narrow a date-like value to a calendar date.

    Accepts ``date``, ``datetime`` and ISO-8601 text (date or full timestamp,
    the time-of-day part is dropped). Empty values map to None.

    Raises:
        ValueError: If text does not start with a ``YYYY-MM-DD`` date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Invalid date: {value!r}") from e


class Task(BaseModel):
    """Actionable unit of work belonging to exactly one goal."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM

    # Nominal 1-10 / minutes; out of range values pass through
    difficulty: int = 1
    time_estimate: int = 0

    # Task IDs within the same goal
    dependencies: list[str] = Field(default_factory=list)

    due_date: Optional[date] = None
    recommended_start_date: Optional[date] = None
    completed_date: Optional[date] = None

    # Hierarchy
    parent_task: Optional[str] = None
    subtasks: list[str] = Field(default_factory=list)

    @field_validator("id", "parent_task", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        """IDs written as bare numbers in YAML load as ints."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("dependencies", "subtasks", mode="before")
    @classmethod
    def _coerce_id_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v]
        return v

    @field_validator("due_date", "recommended_start_date", "completed_date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Optional[date]:
        return to_date(v)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED
