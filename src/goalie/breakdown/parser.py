"""Breakdown prompt construction and defensive reply parsing."""

import json
import logging
import re
from typing import Any

from goalie.goals.models import Goal
from goalie.tasks.models import Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

# First "[" through last "]", newlines included
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

DEFAULT_TIME_ESTIMATE = 30


def build_breakdown_prompt(goal: Goal) -> str:
    """
    Build the natural-language decomposition request for a goal.

    Args:
        goal: Goal to break down

    Returns:
        Prompt asking for a JSON array of task records
    """
    prompt = f"""I need help breaking down this goal into actionable tasks:

Goal: {goal.name}
Description: {goal.description}"""

    if goal.due_date:
        prompt += f"\nDue Date: {goal.due_date.isoformat()}"

    prompt += """

Please break this goal down into specific, actionable tasks. For each task, provide:
1. Title (clear and actionable)
2. Description (detailed enough to know exactly what to do)
3. Priority (high/medium/low)
4. Difficulty (1-10 scale)
5. Time estimate (in minutes)
6. Dependencies (if any, reference by task number)

Format your response as a JSON array of tasks with the following structure:
[
  {
    "title": "Task title",
    "description": "Detailed description",
    "priority": "high|medium|low",
    "difficulty": 1-10,
    "timeEstimate": minutes,
    "dependencies": ["1", "2"] // optional, task numbers this depends on
  }
]

Only return the JSON array, no additional text."""

    return prompt


def fallback_tasks(goal_id: str) -> list[Task]:
    """Single review task used when a reply cannot be parsed."""
    return [
        Task(
            id="1",
            title="Review and break down goal manually",
            description=f"Automatic breakdown failed. Please manually break down the goal: {goal_id}",
            status=TaskStatus.TODO,
            priority=TaskPriority.HIGH,
            difficulty=3,
            time_estimate=60,
        )
    ]


def _task_from_entry(task_id: str, entry: Any) -> Task:
    if not isinstance(entry, dict):
        raise TypeError(f"Task entry {task_id} is not an object: {entry!r}")

    priority = entry.get("priority") or TaskPriority.MEDIUM.value
    return Task(
        id=task_id,
        title=entry.get("title") or f"Task {task_id}",
        description=entry.get("description") or "",
        status=TaskStatus.TODO,
        priority=TaskPriority(str(priority).lower()),
        difficulty=int(entry.get("difficulty") or 1),
        time_estimate=int(entry.get("timeEstimate") or DEFAULT_TIME_ESTIMATE),
        dependencies=[str(dep) for dep in entry.get("dependencies") or []],
    )


def parse_tasks_from_response(response: str, goal_id: str) -> list[Task]:
    """
    Parse a decomposition reply into tasks.

    The first bracket-delimited substring is read as a JSON array; task IDs
    are assigned "1", "2", ... in array order. Any failure yields the single
    fallback review task and logs the raw reply.

    Args:
        response: Raw reply text
        goal_id: Goal the tasks belong to (used in the fallback task)

    Returns:
        Parsed tasks, never empty on failure
    """
    try:
        match = _JSON_ARRAY.search(response)
        if not match:
            raise ValueError("No JSON array found in response")

        entries = json.loads(match.group(0))
        if not isinstance(entries, list):
            raise ValueError("Response JSON is not an array")

        return [_task_from_entry(str(index), entry) for index, entry in enumerate(entries, start=1)]

    except (ValueError, TypeError) as e:
        logger.warning(f"Failed to parse breakdown response for goal {goal_id}: {e}")
        logger.warning(f"Raw response: {response}")
        return fallback_tasks(goal_id)
