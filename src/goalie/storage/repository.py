"""Directory-backed goal and task persistence."""

import logging
import re
from pathlib import Path
from typing import Optional

from goalie.goals.models import Goal
from goalie.storage.frontmatter import (
    decode_goal,
    decode_legacy_goal_record,
    decode_task,
    encode_goal,
    encode_task,
)
from goalie.tasks.models import Task

logger = logging.getLogger(__name__)

GOAL_FILENAME = "goal.md"
LEGACY_GOAL_FILENAME = "goal.json"
TASK_SUFFIX = ".md"

_DIGIT_RUN = re.compile(r"(\d+)")


def _natural_key(name: str) -> list:
    """Sort key putting "2" before "10" and "1.2" before "1.10"."""
    # Digit runs land on odd indices, so two keys never compare int to str
    return [int(part) if part.isdigit() else part for part in _DIGIT_RUN.split(name)]


class GoalRepository:
    """
    Reads and writes goals as one directory per goal.

    Layout::

        <goals_dir>/<goal_id>/goal.md
        <goals_dir>/<goal_id>/<task_id>.md

    Nothing is cached: every call goes to disk, so several short-lived
    processes may use the same directory one after another.
    """

    def __init__(self, goals_dir: str | Path = "./goals") -> None:
        """
        Initialize repository.

        Args:
            goals_dir: Root directory holding one subdirectory per goal
        """
        self.goals_dir = Path(goals_dir)

    def init(self) -> None:
        """Create the root goals directory if needed."""
        self.goals_dir.mkdir(parents=True, exist_ok=True)

    def goal_dir(self, goal_id: str) -> Path:
        return self.goals_dir / goal_id

    def goal_exists(self, goal_id: str) -> bool:
        return self.goal_dir(goal_id).is_dir()

    # -------------------- goals --------------------

    def save_goal(self, goal: Goal) -> None:
        """Write ``goal.md``, creating the goal directory when needed."""
        goal_dir = self.goal_dir(goal.id)
        goal_dir.mkdir(parents=True, exist_ok=True)
        (goal_dir / GOAL_FILENAME).write_text(encode_goal(goal), encoding="utf-8")
        logger.debug(f"Saved goal: {goal.id}")

    def load_goal(self, goal_id: str) -> Optional[Goal]:
        """
        Load a goal.

        A goal still stored as ``goal.json`` is rewritten as ``goal.md`` and
        the JSON file removed.

        Args:
            goal_id: Goal ID (directory name)

        Returns:
            Goal or None if the directory holds neither file
        """
        goal_dir = self.goal_dir(goal_id)
        goal_file = goal_dir / GOAL_FILENAME
        if goal_file.is_file():
            return decode_goal(goal_file.read_text(encoding="utf-8"), goal_id)

        legacy_file = goal_dir / LEGACY_GOAL_FILENAME
        if not legacy_file.is_file():
            return None

        goal = decode_legacy_goal_record(legacy_file.read_text(encoding="utf-8"), goal_id)
        self.save_goal(goal)
        legacy_file.unlink()
        logger.info(f"Migrated goal {goal_id} from {LEGACY_GOAL_FILENAME} to {GOAL_FILENAME}")
        return goal

    def list_goals(self) -> list[Goal]:
        """
        List all goals.

        Returns:
            Goals in directory name order; empty if the root does not exist
        """
        if not self.goals_dir.is_dir():
            return []

        goals = []
        for entry in sorted(self.goals_dir.iterdir(), key=lambda p: _natural_key(p.name)):
            if not entry.is_dir():
                continue
            goal = self.load_goal(entry.name)
            if goal is None:
                logger.debug(f"Skipping directory without goal record: {entry.name}")
                continue
            goals.append(goal)
        return goals

    # -------------------- tasks --------------------

    def save_task(self, goal_id: str, task: Task) -> None:
        """Write ``<goal_dir>/<task_id>.md``."""
        goal_dir = self.goal_dir(goal_id)
        goal_dir.mkdir(parents=True, exist_ok=True)
        (goal_dir / f"{task.id}{TASK_SUFFIX}").write_text(encode_task(task), encoding="utf-8")
        logger.debug(f"Saved task {task.id} in goal {goal_id}")

    def load_task(self, goal_id: str, task_id: str) -> Optional[Task]:
        """
        Load a task.

        Returns:
            Task or None if the file does not exist
        """
        task_file = self.goal_dir(goal_id) / f"{task_id}{TASK_SUFFIX}"
        if not task_file.is_file():
            return None
        return decode_task(task_id, task_file.read_text(encoding="utf-8"))

    def list_tasks_for_goal(self, goal_id: str) -> list[Task]:
        """
        List every task file of a goal.

        Returns:
            Tasks in natural file name order; empty if the goal directory is missing
        """
        goal_dir = self.goal_dir(goal_id)
        if not goal_dir.is_dir():
            return []

        tasks = []
        # Sort on the stem so "1" precedes "1.2"
        for entry in sorted(goal_dir.iterdir(), key=lambda p: _natural_key(p.stem)):
            if not entry.is_file() or entry.name == GOAL_FILENAME:
                continue
            if not entry.name.endswith(TASK_SUFFIX):
                continue
            task_id = entry.name[: -len(TASK_SUFFIX)]
            tasks.append(decode_task(task_id, entry.read_text(encoding="utf-8")))
        return tasks
