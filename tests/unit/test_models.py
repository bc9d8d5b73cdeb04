"""Unit tests for goal and task models."""

from datetime import date, datetime, timezone

import pytest

from goalie.goals.models import Goal, GoalStatus, generate_goal_id, slugify, to_base36
from goalie.tasks.models import Task, TaskPriority, TaskStatus, next_status, to_date


class TestTask:
    """Test Task model."""

    def test_defaults(self):
        """Test a task built from an ID only."""
        task = Task(id="1")

        assert task.title == ""
        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.MEDIUM
        assert task.difficulty == 1
        assert task.time_estimate == 0
        assert task.dependencies == []
        assert task.subtasks == []
        assert task.parent_task is None

    def test_numeric_ids_become_text(self):
        """Test IDs loaded as YAML numbers are coerced to strings."""
        task = Task(id=3, dependencies=[1, 2], subtasks=[3.1], parent_task=7)

        assert task.id == "3"
        assert task.dependencies == ["1", "2"]
        assert task.subtasks == ["3.1"]
        assert task.parent_task == "7"

    def test_camel_case_aliases(self):
        """Test fields populate from on-disk camelCase keys."""
        task = Task.model_validate({"id": "1", "timeEstimate": 45, "dueDate": "2026-03-01"})

        assert task.time_estimate == 45
        assert task.due_date == date(2026, 3, 1)

    def test_timestamp_due_date_narrowed(self):
        """Test a full timestamp due date keeps only the calendar date."""
        task = Task(id="1", due_date="2026-03-01T10:30:00.000Z")

        assert task.due_date == date(2026, 3, 1)

    def test_is_completed(self):
        assert Task(id="1", status=TaskStatus.COMPLETED).is_completed
        assert not Task(id="1").is_completed


class TestStatusCycle:
    """Test interactive status toggling order."""

    @pytest.mark.parametrize(
        "current,expected",
        [
            (TaskStatus.TODO, TaskStatus.IN_PROGRESS),
            (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED),
            (TaskStatus.COMPLETED, TaskStatus.TODO),
        ],
    )
    def test_next_status(self, current, expected):
        assert next_status(current) == expected


class TestToDate:
    """Test date narrowing."""

    def test_empty_values(self):
        assert to_date(None) is None
        assert to_date("") is None

    def test_datetime(self):
        assert to_date(datetime(2026, 1, 2, 23, 59)) == date(2026, 1, 2)

    def test_invalid_text(self):
        """Test unparseable text raises ValueError."""
        with pytest.raises(ValueError):
            to_date("next tuesday")


class TestGoal:
    """Test Goal model."""

    def test_defaults(self):
        goal = Goal(id="g")

        assert goal.status == GoalStatus.ACTIVE
        assert goal.tasks == []
        assert goal.completion_percentage == 0
        assert goal.created_date is None

    def test_task_ids_coerced(self):
        goal = Goal(id="g", tasks=[1, "2"])

        assert goal.tasks == ["1", "2"]


class TestGoalId:
    """Test goal ID generation."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Ship v1", "ship-v1"),
            ("  Learn   Rust!  ", "learn-rust"),
            ("Café & Crème", "caf-cr-me"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, name, expected):
        assert slugify(name) == expected

    def test_to_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"

    def test_generate_goal_id(self):
        """Test slug plus base-36 epoch milliseconds."""
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        millis = int(now.timestamp() * 1000)

        goal_id = generate_goal_id("Ship v1", now)

        assert goal_id == f"ship-v1-{to_base36(millis)}"
        assert int(goal_id.rsplit("-", 1)[1], 36) == millis
