"""Goal data models and ID generation."""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from goalie.tasks.models import to_date

_SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class GoalStatus(str, Enum):
    """Goal lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class Goal(BaseModel):
    """
    Top-level user objective.

    Attributes:
        tasks: Task IDs in creation order. Kept alongside the task files and
            not authoritative: the goal directory listing is.
        completion_percentage: Derived value, refreshed on every listing.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str
    name: str = ""
    description: str = ""
    created_date: Optional[datetime] = None
    due_date: Optional[date] = None
    status: GoalStatus = GoalStatus.ACTIVE
    tasks: list[str] = Field(default_factory=list)
    completion_percentage: int = 0

    @field_validator("tasks", mode="before")
    @classmethod
    def _coerce_task_ids(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v]
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def _coerce_due_date(cls, v: Any) -> Optional[date]:
        return to_date(v)


def slugify(name: str) -> str:
    """Lowercase ``name`` and collapse every non-alphanumeric run into ``-``."""
    slug = _SLUG_SEPARATOR.sub("-", name.lower())
    if slug.startswith("-"):
        slug = slug[1:]
    if slug.endswith("-"):
        slug = slug[:-1]
    return slug


def to_base36(number: int) -> str:
    """Render a non-negative integer in lowercase base 36."""
    if number < 0:
        raise ValueError(f"Cannot encode negative number: {number}")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_goal_id(name: str, now: datetime) -> str:
    """
    Build a goal ID from its name and creation time.

    Args:
        name: Goal name
        now: Creation timestamp

    Returns:
        ``<slug>-<base36 epoch milliseconds>``, e.g. ``ship-v1-mgx3k2a1``
    """
    millis = int(now.timestamp() * 1000)
    return f"{slugify(name)}-{to_base36(millis)}"
