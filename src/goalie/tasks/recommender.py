"""Next-task recommendation: dependency-aware filtering and scoring."""

import logging
import math
from datetime import datetime, time
from typing import Optional

from goalie.goals.models import Goal, GoalStatus
from goalie.storage.repository import GoalRepository
from goalie.tasks.models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

PRIORITY_WEIGHTS = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}

# (max days until due, bonus), checked in order
URGENCY_BONUSES = ((1, 20), (3, 10), (7, 5))

SECONDS_PER_DAY = 24 * 60 * 60


def is_task_eligible(task: Task, pool: list[Task]) -> bool:
    """
    Check if a task can be started now.

    A task is eligible if:
    1. Status is TODO
    2. Every dependency ID resolves to a COMPLETED task in the pool

    A dependency that matches no task in the pool keeps the task blocked.
    When an ID appears more than once, the first task in the pool counts.

    Args:
        task: Task to check
        pool: Every task in scope, in iteration order

    Returns:
        True if eligible
    """
    if task.status != TaskStatus.TODO:
        return False

    first_by_id: dict[str, Task] = {}
    for candidate in pool:
        first_by_id.setdefault(candidate.id, candidate)

    for dep_id in task.dependencies:
        dep_task = first_by_id.get(dep_id)
        if not dep_task or dep_task.status != TaskStatus.COMPLETED:
            return False
    return True


def days_until_due(task: Task, now: datetime) -> Optional[int]:
    """Whole days (rounded up) from ``now`` to the start of the due date."""
    if task.due_date is None:
        return None
    due_at = datetime.combine(task.due_date, time.min, tzinfo=now.tzinfo)
    return math.ceil((due_at - now).total_seconds() / SECONDS_PER_DAY)


def score_task(task: Task, now: datetime) -> float:
    """
    Score a task; higher is recommended first.

    Rewards, in decreasing weight: high priority, low difficulty, short time
    estimate and a looming due date.

    Args:
        task: Task to score
        now: Reference time for due date urgency

    Returns:
        Score
    """
    score = 0.0

    score += PRIORITY_WEIGHTS.get(task.priority, 1) * 10

    # Easier tasks first (quick wins)
    score += (11 - task.difficulty) * 2

    # Prefer tasks under two hours
    score += max(1, 120 - task.time_estimate) / 10

    days = days_until_due(task, now)
    if days is not None:
        for max_days, bonus in URGENCY_BONUSES:
            if days <= max_days:
                score += bonus
                break

    return score


class TaskRecommender:
    """Picks the task to work on next from the goals in scope."""

    def __init__(self, repository: GoalRepository) -> None:
        """
        Initialize recommender.

        Args:
            repository: Goal/task storage
        """
        self.repository = repository

    def _scoped_goals(self, goal_id: Optional[str]) -> list[Goal]:
        """A given goal whatever its status, otherwise every active goal."""
        if goal_id:
            goal = self.repository.load_goal(goal_id)
            return [goal] if goal else []
        return [g for g in self.repository.list_goals() if g.status == GoalStatus.ACTIVE]

    def _collect_pool(self, goal_id: Optional[str]) -> list[Task]:
        pool: list[Task] = []
        for goal in self._scoped_goals(goal_id):
            pool.extend(self.repository.list_tasks_for_goal(goal.id))
        return pool

    def get_available_tasks(self, goal_id: Optional[str] = None) -> list[Task]:
        """
        List tasks that can be started now.

        Args:
            goal_id: Restrict to one goal (active or not); default all active goals

        Returns:
            Eligible tasks in pool order
        """
        pool = self._collect_pool(goal_id)
        return [task for task in pool if is_task_eligible(task, pool)]

    def get_recommended_task(
        self,
        goal_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Task]:
        """
        Get the single best task to work on next.

        Args:
            goal_id: Restrict to one goal (active or not); default all active goals
            now: Reference time for due date urgency (default: current local time)

        Returns:
            Highest scoring eligible task, first in pool order on ties; None if none is eligible
        """
        available = self.get_available_tasks(goal_id)
        if not available:
            return None

        now = now or datetime.now()
        # max() keeps the first of equal scores
        best = max(available, key=lambda t: score_task(t, now))
        logger.debug(f"Recommended task {best.id} out of {len(available)} available")
        return best
