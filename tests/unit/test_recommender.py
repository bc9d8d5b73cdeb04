"""Unit tests for task recommendation."""

from datetime import date, datetime

import pytest

from goalie.goals.models import Goal, GoalStatus
from goalie.storage.repository import GoalRepository
from goalie.tasks.models import Task, TaskPriority, TaskStatus
from goalie.tasks.recommender import (
    TaskRecommender,
    days_until_due,
    is_task_eligible,
    score_task,
)

NOW = datetime(2026, 3, 10, 15, 0)


@pytest.fixture
def repository(tmp_path):
    return GoalRepository(tmp_path / "goals")


def _add_goal(repository, goal_id, tasks, status=GoalStatus.ACTIVE):
    repository.save_goal(Goal(id=goal_id, name=goal_id, status=status))
    for task in tasks:
        repository.save_task(goal_id, task)


class TestEligibility:
    """Test dependency-aware eligibility."""

    def test_todo_without_dependencies(self):
        task = Task(id="1")

        assert is_task_eligible(task, [task])

    @pytest.mark.parametrize("status", [TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED])
    def test_non_todo_never_eligible(self, status):
        task = Task(id="1", status=status)

        assert not is_task_eligible(task, [task])

    def test_chain(self):
        """Test A done, B depends on A, C depends on B: only B is eligible."""
        a = Task(id="A", status=TaskStatus.COMPLETED)
        b = Task(id="B", dependencies=["A"])
        c = Task(id="C", dependencies=["B"])
        pool = [a, b, c]

        assert [t.id for t in pool if is_task_eligible(t, pool)] == ["B"]

    def test_unknown_dependency_blocks(self):
        task = Task(id="1", dependencies=["missing"])

        assert not is_task_eligible(task, [task])

    def test_first_task_with_id_counts(self):
        """Test a duplicated ID resolves to the first task in the pool."""
        first = Task(id="1", status=TaskStatus.TODO)
        second = Task(id="1", status=TaskStatus.COMPLETED)
        dependent = Task(id="2", dependencies=["1"])

        assert not is_task_eligible(dependent, [first, second, dependent])
        assert is_task_eligible(dependent, [second, first, dependent])


class TestScoring:
    """Test the recommendation score."""

    def test_base_score(self):
        """Test medium priority, difficulty 5, 60 minutes, no due date."""
        task = Task(id="1", priority=TaskPriority.MEDIUM, difficulty=5, time_estimate=60)

        assert score_task(task, NOW) == pytest.approx(20 + 12 + 6)

    def test_long_task_floor(self):
        """Test time contribution bottoms out at 0.1."""
        task = Task(id="1", priority=TaskPriority.LOW, difficulty=10, time_estimate=600)

        assert score_task(task, NOW) == pytest.approx(10 + 2 + 0.1)

    @pytest.mark.parametrize(
        "due,bonus",
        [
            (date(2026, 3, 11), 20),
            (date(2026, 3, 10), 20),
            (date(2026, 3, 1), 20),
            (date(2026, 3, 13), 10),
            (date(2026, 3, 17), 5),
            (date(2026, 3, 18), 0),
        ],
    )
    def test_urgency_bonus(self, due, bonus):
        base = Task(id="1", difficulty=5, time_estimate=60)
        task = base.model_copy(update={"due_date": due})

        assert score_task(task, NOW) - score_task(base, NOW) == pytest.approx(bonus)

    def test_days_until_due_rounds_up(self):
        """Test 9 hours until tomorrow's midnight counts as one day."""
        task = Task(id="1", due_date=date(2026, 3, 11))

        assert days_until_due(task, NOW) == 1
        assert days_until_due(Task(id="2"), NOW) is None


class TestTaskRecommender:
    """Test TaskRecommender over a repository."""

    def test_no_goals(self, repository):
        assert TaskRecommender(repository).get_recommended_task(now=NOW) is None

    def test_due_tomorrow_wins(self, repository):
        """Test a high-priority task due tomorrow beats an undated one."""
        _add_goal(
            repository,
            "g",
            [
                Task(id="1", priority=TaskPriority.HIGH, difficulty=5, time_estimate=60),
                Task(
                    id="2",
                    priority=TaskPriority.HIGH,
                    difficulty=5,
                    time_estimate=60,
                    due_date=date(2026, 3, 11),
                ),
            ],
        )

        best = TaskRecommender(repository).get_recommended_task(now=NOW)

        assert best.id == "2"

    def test_tie_keeps_first(self, repository):
        _add_goal(repository, "g", [Task(id="1", title="First"), Task(id="2", title="Second")])

        assert TaskRecommender(repository).get_recommended_task(now=NOW).id == "1"

    def test_inactive_goals_skipped_unless_named(self, repository):
        _add_goal(repository, "paused", [Task(id="1")], status=GoalStatus.PAUSED)
        recommender = TaskRecommender(repository)

        assert recommender.get_recommended_task(now=NOW) is None
        assert recommender.get_recommended_task("paused", now=NOW).id == "1"

    def test_unknown_goal(self, repository):
        assert TaskRecommender(repository).get_available_tasks("missing") == []

    def test_available_tasks_across_goals(self, repository):
        _add_goal(
            repository,
            "a",
            [Task(id="1", status=TaskStatus.COMPLETED), Task(id="2", dependencies=["1"])],
        )
        _add_goal(repository, "b", [Task(id="1", status=TaskStatus.IN_PROGRESS)])

        available = TaskRecommender(repository).get_available_tasks()

        assert [t.id for t in available] == ["2"]

    def test_dependents_unlock_after_completion(self, repository):
        """Test B and C wait on A; completed C is never offered again."""
        _add_goal(
            repository,
            "g",
            [
                Task(id="A"),
                Task(id="B", dependencies=["A"]),
                Task(id="C", dependencies=["A"], status=TaskStatus.COMPLETED),
            ],
        )
        recommender = TaskRecommender(repository)

        assert [t.id for t in recommender.get_available_tasks()] == ["A"]

        task_a = repository.load_task("g", "A")
        task_a.status = TaskStatus.COMPLETED
        repository.save_task("g", task_a)

        assert [t.id for t in recommender.get_available_tasks()] == ["B"]


class TestRanking:
    """Test which of two otherwise identical tasks is recommended."""

    @pytest.mark.parametrize("priorities", [("low", "high"), ("high", "low")])
    def test_high_priority_beats_low(self, repository, priorities):
        _add_goal(
            repository,
            "g",
            [
                Task(id=str(i), priority=p, difficulty=5, time_estimate=60)
                for i, p in enumerate(priorities, start=1)
            ],
        )

        best = TaskRecommender(repository).get_recommended_task(now=NOW)

        assert best.priority == TaskPriority.HIGH

    @pytest.mark.parametrize("difficulties", [(2, 9), (9, 2)])
    def test_easier_task_beats_harder(self, repository, difficulties):
        _add_goal(
            repository,
            "g",
            [
                Task(id=str(i), difficulty=d, time_estimate=60)
                for i, d in enumerate(difficulties, start=1)
            ],
        )

        best = TaskRecommender(repository).get_recommended_task(now=NOW)

        assert best.difficulty == 2

    def test_due_tomorrow_beats_undated(self):
        undated = Task(id="1", difficulty=5, time_estimate=60)
        due = Task(id="2", difficulty=5, time_estimate=60, due_date=date(2026, 3, 11))

        assert score_task(due, NOW) - score_task(undated, NOW) == pytest.approx(20)
