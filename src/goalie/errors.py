"""Exceptions raised by the goalie core."""


class GoalieError(Exception):
    """Base class for goalie errors."""


class NotFoundError(GoalieError, KeyError):
    """A goal or task required by an operation does not exist."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""


class GoalNotFoundError(NotFoundError):
    """Goal directory holds no readable goal record."""

    def __init__(self, goal_id: str) -> None:
        super().__init__(f"Goal not found: {goal_id}")
        self.goal_id = goal_id


class TaskNotFoundError(NotFoundError):
    """Task file is missing from a goal (or from every goal)."""

    def __init__(self, task_id: str, goal_id: str | None = None) -> None:
        if goal_id:
            message = f"Task {task_id} not found in goal {goal_id}"
        else:
            message = f"Task not found: {task_id}"
        super().__init__(message)
        self.task_id = task_id
        self.goal_id = goal_id
