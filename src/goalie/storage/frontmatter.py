"""Markdown + YAML frontmatter codec for goals and tasks.

Current format::

    ---
    id: "1"
    title: Write the release notes
    status: todo
    ---

    Free-form description.

Two historical formats are still read: task bodies written as plain markdown
(``# Title`` plus ``**Key:** value`` lines) and goals stored as a whole JSON
record (``goal.json``). Writes always use the current format.
"""

import json
import logging
import re
from copy import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

import yaml
from pydantic import BaseModel, ValidationError

from goalie.goals.models import Goal, GoalStatus
from goalie.tasks.models import Task, TaskPriority, TaskStatus, to_date

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
LEGACY_DESCRIPTION_MARKER = "## Description"


class RecordFormat(str, Enum):
    """On-disk shape a record was decoded from."""

    CURRENT = "current"
    LEGACY_TEXT = "legacy_text"
    LEGACY_RECORD = "legacy_record"


@dataclass
class DecodedRecord:
    """Raw metadata and body pulled out of a file, before defaults apply."""

    format: RecordFormat
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


# ---------------------------------------------------------------------------
# Field tables
# ---------------------------------------------------------------------------


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Expected integer, got boolean {value!r}")
    if isinstance(value, float):
        return int(value)
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def _as_text(value: Any) -> str:
    return str(value)


def _as_id_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    raise TypeError(f"Expected list, got {type(value).__name__}")


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _as_enum(enum_type: type[Enum]) -> Callable[[Any], Enum]:
    def coerce(value: Any) -> Enum:
        return enum_type(str(value).strip().lower())

    return coerce


# Keys are the on-disk (camelCase) names. A key missing from a record takes
# its default; a key present keeps its value when it coerces cleanly.
TASK_DEFAULTS: dict[str, Any] = {
    "title": "",
    "status": TaskStatus.TODO,
    "priority": TaskPriority.MEDIUM,
    "difficulty": 1,
    "timeEstimate": 0,
    "dependencies": [],
    "dueDate": None,
    "recommendedStartDate": None,
    "completedDate": None,
    "parentTask": None,
    "subtasks": [],
}

GOAL_DEFAULTS: dict[str, Any] = {
    "name": "",
    "createdDate": None,
    "dueDate": None,
    "status": GoalStatus.ACTIVE,
    "tasks": [],
    "completionPercentage": 0,
}

_FIELD_COERCERS: dict[str, Callable[[Any], Any]] = {
    "title": _as_text,
    "name": _as_text,
    "priority": _as_enum(TaskPriority),
    "difficulty": _as_int,
    "timeEstimate": _as_int,
    "completionPercentage": _as_int,
    "dependencies": _as_id_list,
    "subtasks": _as_id_list,
    "tasks": _as_id_list,
    "dueDate": to_date,
    "recommendedStartDate": to_date,
    "completedDate": to_date,
    "createdDate": _as_datetime,
    "parentTask": _as_text,
}

TASK_COERCERS = {**_FIELD_COERCERS, "status": _as_enum(TaskStatus)}
GOAL_COERCERS = {**_FIELD_COERCERS, "status": _as_enum(GoalStatus)}


def _apply_defaults(
    metadata: dict[str, Any],
    defaults: dict[str, Any],
    coercers: dict[str, Callable[[Any], Any]],
    record_id: str,
) -> dict[str, Any]:
    """Map raw metadata through a default table, coercing present keys."""
    values: dict[str, Any] = {}
    for key, default in defaults.items():
        raw = metadata.get(key)
        if raw is None:
            values[key] = copy(default)
            continue
        coerce = coercers.get(key)
        if coerce is None:
            values[key] = raw
            continue
        try:
            values[key] = coerce(raw)
        except (TypeError, ValueError):
            logger.warning(
                f"Invalid {key} value {raw!r} in record {record_id!r}, using default {default!r}"
            )
            values[key] = copy(default)
    return values


# ---------------------------------------------------------------------------
# Frontmatter split / render
# ---------------------------------------------------------------------------


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    Split content into frontmatter metadata and body.

    Content without a leading ``---`` line is all body. A block that is not
    closed, is not valid YAML, or is not a mapping is treated the same way.

    Args:
        text: File content

    Returns:
        Tuple of (metadata, body); body is stripped when frontmatter is found
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if not lines or lines[0] != FRONTMATTER_DELIMITER:
        return {}, text

    try:
        end = lines.index(FRONTMATTER_DELIMITER, 1)
    except ValueError:
        logger.warning("Unterminated frontmatter block, reading content as body")
        return {}, text

    frontmatter_yaml = "\n".join(lines[1:end])
    body = "\n".join(lines[end + 1 :]).strip()

    try:
        metadata = yaml.safe_load(frontmatter_yaml)
    except yaml.YAMLError as e:
        logger.warning(f"Invalid YAML frontmatter, reading content as body: {e}")
        return {}, text

    if metadata is None:
        return {}, body
    if not isinstance(metadata, dict):
        logger.warning("Frontmatter is not a mapping, reading content as body")
        return {}, text

    return metadata, body


class _FrontmatterDumper(yaml.SafeDumper):
    """
    SafeDumper for the metadata block.

    Mappings are written as ``key: value`` lines, lists inline, timestamps
    as ISO-8601 with a ``T`` separator.
    """


def _represent_datetime(dumper: yaml.SafeDumper, data: datetime) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:timestamp", data.isoformat())


def _represent_list(dumper: yaml.SafeDumper, data: list) -> yaml.SequenceNode:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True)


_FrontmatterDumper.add_representer(datetime, _represent_datetime)
_FrontmatterDumper.add_representer(list, _represent_list)


def render_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Render metadata and body as ``---``/YAML/``---``/blank line/body."""
    frontmatter_yaml = yaml.dump(
        metadata,
        Dumper=_FrontmatterDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    ).rstrip("\n")
    return f"{FRONTMATTER_DELIMITER}\n{frontmatter_yaml}\n{FRONTMATTER_DELIMITER}\n\n{body}"


def _model_metadata(model: BaseModel) -> dict[str, Any]:
    """Dump a model to on-disk keys, dropping empty values and the body."""
    metadata: dict[str, Any] = {}
    for key, value in model.model_dump(by_alias=True, exclude={"description"}).items():
        if value is None or value == "" or value == []:
            continue
        if isinstance(value, Enum):
            value = value.value
        metadata[key] = value
    return metadata


# ---------------------------------------------------------------------------
# Record readers
# ---------------------------------------------------------------------------


_LEGACY_FIELD_LINE = re.compile(r"^\*\*(?P<label>[^*:]+):\*\*(?P<value>.*)$")

_LEGACY_LABELS = {
    "Status": "status",
    "Priority": "priority",
    "Difficulty": "difficulty",
    "Time Estimate": "timeEstimate",
    "Dependencies": "dependencies",
    "Due Date": "dueDate",
    "Recommended Start Date": "recommendedStartDate",
    "Completed Date": "completedDate",
    "Parent Task": "parentTask",
    "Subtasks": "subtasks",
}


def _parse_legacy_task_text(text: str) -> Optional[tuple[dict[str, Any], str]]:
    """
    Read the pre-frontmatter task markdown.

    Example::

        # Write tests
        **Status:** todo
        **Priority:** high
        **Difficulty:** 4/10
        **Time Estimate:** 45 minutes
        **Dependencies:** 1, 2

        ## Description
        Cover the parser.

    Returns None when no heading, field line or description marker is found.
    """
    metadata: dict[str, Any] = {}
    description_lines: list[str] = []
    in_description = False

    for raw_line in text.split("\n"):
        line = raw_line.rstrip("\r")

        if in_description:
            if line.strip():
                description_lines.append(line)
            continue

        if line.strip() == LEGACY_DESCRIPTION_MARKER:
            in_description = True
            continue

        # Only the first heading sets the title
        if line.startswith("# ") and "title" not in metadata:
            metadata["title"] = line[2:].strip()
            continue

        match = _LEGACY_FIELD_LINE.match(line)
        if not match:
            continue
        key = _LEGACY_LABELS.get(match.group("label").strip())
        if key is None:
            continue
        value = match.group("value").strip()
        if value.startswith("**"):
            value = value[2:]
        if value.endswith("**"):
            value = value[:-2]
        value = value.strip()

        if key == "difficulty":
            value = value.split("/")[0].strip()
        elif key == "timeEstimate":
            value = value.split()[0] if value else ""
        elif key in ("dependencies", "subtasks"):
            value = _as_id_list(value)
        metadata[key] = value if value != "" else None

    if not metadata and not in_description:
        return None
    return metadata, "\n".join(description_lines).strip()


def read_task_record(text: str) -> DecodedRecord:
    """Decode task content: frontmatter first, legacy markdown otherwise."""
    metadata, body = split_frontmatter(text)
    if metadata:
        return DecodedRecord(RecordFormat.CURRENT, metadata, body)

    legacy = _parse_legacy_task_text(text)
    if legacy is None:
        return DecodedRecord(RecordFormat.LEGACY_TEXT, {}, text.strip())
    metadata, description = legacy
    return DecodedRecord(RecordFormat.LEGACY_TEXT, metadata, description)


def read_goal_record(text: str) -> DecodedRecord:
    """Decode ``goal.md`` content."""
    metadata, body = split_frontmatter(text)
    return DecodedRecord(RecordFormat.CURRENT, metadata, body)


def read_legacy_goal_record(text: str) -> DecodedRecord:
    """Decode a legacy ``goal.json`` whole-record document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid legacy goal record, reading content as body: {e}")
        return DecodedRecord(RecordFormat.LEGACY_RECORD, {}, text)

    if not isinstance(data, dict):
        logger.warning("Legacy goal record is not an object, reading content as body")
        return DecodedRecord(RecordFormat.LEGACY_RECORD, {}, text)

    metadata = dict(data)
    description = metadata.pop("description", None)
    return DecodedRecord(
        RecordFormat.LEGACY_RECORD,
        metadata,
        str(description) if description is not None else "",
    )


# ---------------------------------------------------------------------------
# Public codec
# ---------------------------------------------------------------------------


def encode_task(task: Task) -> str:
    """Encode a task in the current frontmatter format."""
    return render_frontmatter(_model_metadata(task), task.description)


def encode_goal(goal: Goal) -> str:
    """Encode a goal in the current frontmatter format."""
    return render_frontmatter(_model_metadata(goal), goal.description)


def task_from_record(task_id: str, record: DecodedRecord) -> Task:
    """Build a Task from a decoded record, applying the task default table."""
    metadata = record.metadata
    record_id = str(metadata.get("id") or task_id)
    values = _apply_defaults(metadata, TASK_DEFAULTS, TASK_COERCERS, record_id)

    try:
        return Task(id=record_id, description=record.body, **values)
    except ValidationError as e:
        logger.warning(f"Malformed task record {record_id!r}, keeping body only: {e}")
        return Task(id=task_id, description=record.body)


def goal_from_record(record: DecodedRecord, goal_id: Optional[str] = None) -> Goal:
    """Build a Goal from a decoded record, applying the goal default table."""
    metadata = record.metadata
    record_id = str(metadata.get("id") or goal_id or "")
    values = _apply_defaults(metadata, GOAL_DEFAULTS, GOAL_COERCERS, record_id)

    try:
        return Goal(id=record_id, description=record.body, **values)
    except ValidationError as e:
        logger.warning(f"Malformed goal record {record_id!r}, keeping body only: {e}")
        return Goal(id=goal_id or record_id, description=record.body)


def decode_task(task_id: str, text: str) -> Task:
    """
    Decode task file content.

    Args:
        task_id: ID to use when the content does not carry one (file name)
        text: File content, current or legacy markdown format

    Returns:
        Task; never raises on malformed content
    """
    return task_from_record(task_id, read_task_record(text))


def decode_goal(text: str, goal_id: Optional[str] = None) -> Goal:
    """Decode ``goal.md`` content; ``goal_id`` fills a missing ``id`` key."""
    return goal_from_record(read_goal_record(text), goal_id)


def decode_legacy_goal_record(text: str, goal_id: Optional[str] = None) -> Goal:
    """Decode legacy ``goal.json`` content."""
    return goal_from_record(read_legacy_goal_record(text), goal_id)
