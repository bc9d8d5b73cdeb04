"""Unit tests for breakdown prompt, decomposers and reply parsing."""

import json

import pytest

from goalie.breakdown.parser import build_breakdown_prompt, parse_tasks_from_response
from goalie.breakdown.prompt_file import (
    PLACEHOLDER_TASKS,
    PromptFileDecomposer,
    ResponseFileDecomposer,
)
from goalie.goals.models import Goal
from goalie.tasks.models import TaskPriority, TaskStatus


class TestBuildPrompt:
    """Test decomposition prompt text."""

    def test_prompt_without_due_date(self):
        prompt = build_breakdown_prompt(Goal(id="g", name="Run a marathon", description="42km"))

        assert "Goal: Run a marathon" in prompt
        assert "Description: 42km" in prompt
        assert "Due Date" not in prompt
        assert prompt.endswith("Only return the JSON array, no additional text.")


class TestParseTasks:
    """Test defensive reply parsing."""

    def test_sequential_ids(self):
        reply = json.dumps([{"title": "a"}, {"title": "b"}, {"title": "c"}])

        tasks = parse_tasks_from_response(reply, "g")

        assert [t.id for t in tasks] == ["1", "2", "3"]
        assert all(t.status == TaskStatus.TODO for t in tasks)

    def test_missing_fields_use_defaults(self):
        tasks = parse_tasks_from_response("[{}]", "g")

        assert tasks[0].title == "Task 1"
        assert tasks[0].priority == TaskPriority.MEDIUM
        assert tasks[0].difficulty == 1
        assert tasks[0].time_estimate == 30
        assert tasks[0].dependencies == []

    @pytest.mark.parametrize(
        "reply",
        [
            "no brackets here",
            "[not json]",
            '{"title": "object, not array"}',
            "[1, 2]",
            '[{"title": "x", "priority": "urgent"}]',
        ],
    )
    def test_fallback(self, reply):
        tasks = parse_tasks_from_response(reply, "my-goal")

        assert len(tasks) == 1
        assert tasks[0].id == "1"
        assert tasks[0].title == "Review and break down goal manually"
        assert tasks[0].description == (
            "Automatic breakdown failed. Please manually break down the goal: my-goal"
        )
        assert tasks[0].difficulty == 3
        assert tasks[0].time_estimate == 60


class TestPromptFileDecomposer:
    """Test the default human-in-the-loop decomposer."""

    def test_writes_prompt_and_returns_placeholder(self, tmp_path):
        decomposer = PromptFileDecomposer(tmp_path)

        reply = decomposer.decompose("Break down: Ship v1")

        assert json.loads(reply) == PLACEHOLDER_TASKS
        assert decomposer.last_prompt_file.parent == tmp_path
        assert decomposer.last_prompt_file.name.startswith("goal-breakdown-prompt-")
        content = decomposer.last_prompt_file.read_text()
        assert "Break down: Ship v1" in content
        assert "goalie breakdown <goal-id> --response" in content

    def test_placeholder_parses_to_two_tasks(self, tmp_path):
        tasks = parse_tasks_from_response(PromptFileDecomposer(tmp_path).decompose("x"), "g")

        assert [t.title for t in tasks] == [
            "Review goal and create detailed plan",
            "Execute first phase of goal",
        ]
        assert tasks[1].dependencies == ["1"]


class TestResponseFileDecomposer:
    """Test replaying a saved reply."""

    def test_reads_file(self, tmp_path):
        response_file = tmp_path / "reply.json"
        response_file.write_text('[{"title": "From file"}]')

        reply = ResponseFileDecomposer(response_file).decompose("ignored prompt")

        assert parse_tasks_from_response(reply, "g")[0].title == "From file"
