"""Human-in-the-loop decomposers backed by files."""

import json
import logging
import time
from pathlib import Path

from goalie.breakdown.base import Decomposer

logger = logging.getLogger(__name__)

PLACEHOLDER_TASKS = [
    {
        "title": "Review goal and create detailed plan",
        "description": "Break down this goal into specific, actionable tasks with priorities and time estimates",
        "priority": "high",
        "difficulty": 3,
        "timeEstimate": 60,
        "dependencies": [],
    },
    {
        "title": "Execute first phase of goal",
        "description": "Begin working on the initial tasks identified in the planning phase",
        "priority": "medium",
        "difficulty": 5,
        "timeEstimate": 120,
        "dependencies": ["1"],
    },
]

PROMPT_FILE_TEMPLATE = """# Goal Breakdown Request

{prompt}

## Instructions
1. Copy the goal breakdown prompt above
2. Paste it into your AI assistant and ask it to break down the goal
3. Save the JSON reply to a file, e.g. `breakdown-response.json`
4. Import it with: `goalie breakdown <goal-id> --response breakdown-response.json`

The expected JSON format is:
```json
[
  {{
    "title": "Task title",
    "description": "Detailed description",
    "priority": "high|medium|low",
    "difficulty": 1-10,
    "timeEstimate": minutes,
    "dependencies": ["1", "2"]
  }}
]
```
"""


class PromptFileDecomposer(Decomposer):
    """
    Default decomposer used when no live integration exists.

    Writes the prompt plus instructions to ``goal-breakdown-prompt-<ms>.md``
    so a person can run it through an assistant, and returns a fixed
    two-task plan as a placeholder.
    """

    name = "prompt_file"

    def __init__(self, output_dir: str | Path = ".") -> None:
        """
        Initialize decomposer.

        Args:
            output_dir: Directory receiving prompt files
        """
        self.output_dir = Path(output_dir)
        self.last_prompt_file: Path | None = None

    def decompose(self, prompt: str) -> str:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        prompt_file = self.output_dir / f"goal-breakdown-prompt-{int(time.time() * 1000)}.md"
        prompt_file.write_text(PROMPT_FILE_TEMPLATE.format(prompt=prompt), encoding="utf-8")
        self.last_prompt_file = prompt_file

        logger.info(f"Breakdown prompt saved to: {prompt_file}")
        return json.dumps(PLACEHOLDER_TASKS)


class ResponseFileDecomposer(Decomposer):
    """Replays an assistant reply saved to disk (the import half of the prompt-file flow)."""

    name = "response_file"

    def __init__(self, response_file: str | Path) -> None:
        self.response_file = Path(response_file)

    def decompose(self, prompt: str) -> str:
        logger.info(f"Reading breakdown response from: {self.response_file}")
        return self.response_file.read_text(encoding="utf-8")
