"""Goal manager for goal creation, breakdown and progress."""

import logging
import math
from datetime import date, datetime, timezone
from typing import Optional

from goalie.breakdown.base import Decomposer
from goalie.breakdown.parser import build_breakdown_prompt, parse_tasks_from_response
from goalie.breakdown.prompt_file import PromptFileDecomposer
from goalie.errors import GoalNotFoundError
from goalie.goals.models import Goal, GoalStatus, generate_goal_id
from goalie.storage.repository import GoalRepository
from goalie.tasks.models import Task, TaskStatus, to_date

logger = logging.getLogger(__name__)


class GoalManager:
    """Manager for goal creation, decomposition and completion tracking."""

    def __init__(
        self,
        repository: GoalRepository,
        decomposer: Optional[Decomposer] = None,
    ) -> None:
        """
        Initialize goal manager.

        Args:
            repository: Goal/task storage
            decomposer: Breakdown strategy (default: prompt-file stub)
        """
        self.repository = repository
        self.decomposer = decomposer or PromptFileDecomposer()

    def init(self) -> None:
        """Create the goals directory."""
        self.repository.init()

    def create_goal(
        self,
        name: str,
        description: Optional[str] = None,
        due_date: Optional[str | date] = None,
    ) -> Goal:
        """
        Create and persist a new active goal.

        Args:
            name: Goal name
            description: Goal description
            due_date: Due date as ``YYYY-MM-DD`` text or a date

        Returns:
            Created goal

        Raises:
            ValueError: If the due date cannot be parsed
        """
        now = datetime.now(timezone.utc)
        goal = Goal(
            id=generate_goal_id(name, now),
            name=name,
            description=description or "",
            created_date=now,
            due_date=to_date(due_date),
            status=GoalStatus.ACTIVE,
            tasks=[],
            completion_percentage=0,
        )

        self.repository.save_goal(goal)
        logger.info(f"Created goal: {goal.id} - {goal.name}")

        return goal

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return self.repository.load_goal(goal_id)

    def breakdown_goal(self, goal_id: str) -> list[Task]:
        """
        Decompose a goal into tasks and persist them.

        Args:
            goal_id: Goal ID

        Returns:
            Created tasks, IDs "1", "2", ... in reply order; existing task
            files with the same IDs are overwritten and the IDs appended
            to ``goal.tasks`` again

        Raises:
            GoalNotFoundError: If the goal does not exist
        """
        goal = self.repository.load_goal(goal_id)
        if not goal:
            raise GoalNotFoundError(goal_id)

        prompt = build_breakdown_prompt(goal)
        response = self.decomposer.decompose(prompt)
        tasks = parse_tasks_from_response(response, goal_id)

        for task in tasks:
            self.repository.save_task(goal_id, task)
            goal.tasks.append(task.id)

        self.repository.save_goal(goal)
        logger.info(f"Created {len(tasks)} tasks for goal {goal_id!r} using {self.decomposer.name}")

        return tasks

    def list_goals(self) -> list[Goal]:
        """
        List all goals with live completion percentages.

        Returns:
            Goals in enumeration order
        """
        goals = self.repository.list_goals()
        for goal in goals:
            goal.completion_percentage = self.calculate_completion_percentage(goal.id)
        return goals

    def calculate_completion_percentage(self, goal_id: str) -> int:
        """
        Percentage of a goal's task files that are completed.

        Returns:
            0-100, rounded half up; 0 when the goal has no tasks
        """
        tasks = self.repository.list_tasks_for_goal(goal_id)
        if not tasks:
            return 0

        completed = len([t for t in tasks if t.status == TaskStatus.COMPLETED])
        return math.floor(completed * 100 / len(tasks) + 0.5)
