"""Goalie - break goals into tasks and pick what to work on next."""

__version__ = "0.1.0"

from goalie.errors import GoalieError, GoalNotFoundError, NotFoundError, TaskNotFoundError
from goalie.goals.manager import GoalManager
from goalie.goals.models import Goal, GoalStatus
from goalie.storage.repository import GoalRepository
from goalie.tasks.manager import TaskManager
from goalie.tasks.models import Task, TaskPriority, TaskStatus
from goalie.tasks.recommender import TaskRecommender

__all__ = [
    "GoalieError",
    "NotFoundError",
    "GoalNotFoundError",
    "TaskNotFoundError",
    "Goal",
    "GoalStatus",
    "GoalManager",
    "GoalRepository",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskManager",
    "TaskRecommender",
]
