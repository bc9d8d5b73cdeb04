"""Markdown persistence for goals and tasks."""

from goalie.storage.frontmatter import (
    DecodedRecord,
    RecordFormat,
    decode_goal,
    decode_legacy_goal_record,
    decode_task,
    encode_goal,
    encode_task,
)
from goalie.storage.repository import GoalRepository

__all__ = [
    "DecodedRecord",
    "RecordFormat",
    "decode_goal",
    "decode_legacy_goal_record",
    "decode_task",
    "encode_goal",
    "encode_task",
    "GoalRepository",
]
