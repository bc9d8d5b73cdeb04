"""Goal decomposition: prompt, collaborator strategies and reply parsing."""

from goalie.breakdown.base import Decomposer
from goalie.breakdown.parser import build_breakdown_prompt, parse_tasks_from_response
from goalie.breakdown.prompt_file import PromptFileDecomposer, ResponseFileDecomposer

__all__ = [
    "Decomposer",
    "PromptFileDecomposer",
    "ResponseFileDecomposer",
    "build_breakdown_prompt",
    "parse_tasks_from_response",
]
