"""Task manager for task status changes and subtask creation."""

import logging
from datetime import date
from typing import Optional

from goalie.errors import TaskNotFoundError
from goalie.storage.repository import GoalRepository
from goalie.tasks.models import Task, TaskPriority, TaskStatus, next_status
from goalie.tasks.recommender import TaskRecommender

logger = logging.getLogger(__name__)

DEFAULT_SUBTASK_TIME_ESTIMATE = 30


class TaskManager:
    """Manager for task lifecycle on top of the goal repository."""

    def __init__(
        self,
        repository: GoalRepository,
        recommender: Optional[TaskRecommender] = None,
    ) -> None:
        """
        Initialize task manager.

        Args:
            repository: Goal/task storage
            recommender: Next-task recommender (default: one over the same repository)
        """
        self.repository = repository
        self.recommender = recommender or TaskRecommender(repository)

    def get_task(self, goal_id: str, task_id: str) -> Optional[Task]:
        return self.repository.load_task(goal_id, task_id)

    def get_tasks_for_goal(self, goal_id: str) -> list[Task]:
        return self.repository.list_tasks_for_goal(goal_id)

    def get_recommended_task(self, goal_id: Optional[str] = None) -> Optional[Task]:
        return self.recommender.get_recommended_task(goal_id)

    def get_available_tasks(self, goal_id: Optional[str] = None) -> list[Task]:
        return self.recommender.get_available_tasks(goal_id)

    def complete_task(self, task_id: str) -> Task:
        """
        Mark a task completed, searching every goal for its ID.

        Task IDs are only unique within a goal; the first goal (in
        enumeration order) holding the ID wins.

        Args:
            task_id: Task ID

        Returns:
            Updated task

        Raises:
            TaskNotFoundError: If no goal has the task
        """
        for goal in self.repository.list_goals():
            task = self.repository.load_task(goal.id, task_id)
            if task:
                task.status = TaskStatus.COMPLETED
                task.completed_date = date.today()
                self.repository.save_task(goal.id, task)
                logger.info(f"Completed task {task_id} in goal {goal.id}")
                return task

        raise TaskNotFoundError(task_id)

    def update_task_status(self, goal_id: str, task_id: str, status: TaskStatus | str) -> Task:
        """
        Set a task's status.

        Completing stamps ``completed_date``; moving back to todo or
        in_progress leaves an existing ``completed_date`` in place.

        Args:
            goal_id: Goal ID
            task_id: Task ID
            status: New status

        Returns:
            Updated task

        Raises:
            TaskNotFoundError: If the task is not in the goal
            ValueError: If status is not a valid task status
        """
        status = TaskStatus(status)
        task = self.repository.load_task(goal_id, task_id)
        if not task:
            raise TaskNotFoundError(task_id, goal_id)

        task.status = status
        if status == TaskStatus.COMPLETED:
            task.completed_date = date.today()

        self.repository.save_task(goal_id, task)
        logger.info(f"Task {task_id} in goal {goal_id} -> {status.value}")

        return task

    def toggle_task_status(self, goal_id: str, task_id: str) -> Task:
        """Advance a task one step through todo -> in_progress -> completed -> todo."""
        task = self.repository.load_task(goal_id, task_id)
        if not task:
            raise TaskNotFoundError(task_id, goal_id)
        return self.update_task_status(goal_id, task_id, next_status(task.status))

    def create_subtask(
        self,
        goal_id: str,
        parent_task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[TaskPriority | str] = None,
        difficulty: Optional[int] = None,
        time_estimate: Optional[int] = None,
        dependencies: Optional[list[str]] = None,
    ) -> Task:
        """
        Create a subtask under an existing task.

        The subtask ID is ``<parent_id>.<n>`` where n is one more than the
        parent's current subtask count. Priority and difficulty default to the
        parent's. The subtask file is written before the parent is updated;
        the two writes are not atomic.

        Args:
            goal_id: Goal ID
            parent_task_id: Parent task ID
            title: Title (default "Subtask <n>")
            description: Description
            priority: Priority (default parent's)
            difficulty: Difficulty (default parent's)
            time_estimate: Minutes (default 30)
            dependencies: Task IDs the subtask depends on

        Returns:
            Created subtask

        Raises:
            TaskNotFoundError: If the parent task is not in the goal
        """
        parent = self.repository.load_task(goal_id, parent_task_id)
        if not parent:
            raise TaskNotFoundError(parent_task_id, goal_id)

        subtask_number = len(parent.subtasks) + 1
        subtask_id = f"{parent_task_id}.{subtask_number}"

        subtask = Task(
            id=subtask_id,
            title=title or f"Subtask {subtask_number}",
            description=description or "",
            status=TaskStatus.TODO,
            priority=priority if priority is not None else parent.priority,
            difficulty=difficulty if difficulty is not None else parent.difficulty,
            time_estimate=(
                time_estimate if time_estimate is not None else DEFAULT_SUBTASK_TIME_ESTIMATE
            ),
            dependencies=list(dependencies or []),
            parent_task=parent_task_id,
        )

        self.repository.save_task(goal_id, subtask)

        parent.subtasks.append(subtask_id)
        self.repository.save_task(goal_id, parent)

        logger.info(f"Created subtask {subtask_id} in goal {goal_id}")
        return subtask
