"""Task models, recommendation and lifecycle."""

from goalie.tasks.models import Task, TaskPriority, TaskStatus, next_status

__all__ = ["Task", "TaskPriority", "TaskStatus", "next_status"]
