"""CLI interface for goalie."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from goalie import __version__
from goalie.breakdown.base import Decomposer
from goalie.breakdown.prompt_file import PromptFileDecomposer, ResponseFileDecomposer
from goalie.display import DisplayManager
from goalie.errors import GoalieError
from goalie.goals.manager import GoalManager
from goalie.storage.repository import GoalRepository
from goalie.tasks.manager import TaskManager
from goalie.tasks.models import TaskPriority, TaskStatus

# Load environment variables from .env file
load_dotenv()

console = Console()

DEFAULT_CONFIG_PATH = Path("config/default.yaml")
DEFAULT_GOALS_DIR = "./goals"
DEFAULT_LOG_FILE = "./.goalie/logs/goalie.log"
GOALS_DIR_ENV = "GOALIE_GOALS_DIR"


def _load_config(config_path: Path | None) -> dict:
    """Load configuration from file or use default."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    # Built-in defaults apply without a config file
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        return {}


def _setup_logging(config: dict) -> None:
    """Setup logging based on configuration."""
    log_config = config.get("logging", {})
    log_level = str(log_config.get("level", "INFO")).upper()
    log_file = log_config.get("file", DEFAULT_LOG_FILE)

    # Ensure log directory exists
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler() if log_config.get("console", False) else logging.NullHandler(),
        ],
    )


def _resolve_goals_dir(config: dict, override: Path | None) -> Path:
    """CLI option, then GOALIE_GOALS_DIR, then config file, then ./goals."""
    if override:
        return override
    return Path(os.environ.get(GOALS_DIR_ENV) or config.get("goals_dir") or DEFAULT_GOALS_DIR)


def _goal_manager(ctx: click.Context, decomposer: Optional[Decomposer] = None) -> GoalManager:
    config = ctx.obj["config"]
    if decomposer is None:
        prompt_dir = config.get("breakdown", {}).get("prompt_dir", ".")
        decomposer = PromptFileDecomposer(prompt_dir)
    return GoalManager(ctx.obj["repository"], decomposer)


def _task_manager(ctx: click.Context) -> TaskManager:
    return TaskManager(ctx.obj["repository"])


def _fail(ctx: click.Context, error: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    ctx.exit(1)


def _report_breakdown(goal_manager: GoalManager, tasks: list, goal_name: str) -> None:
    decomposer = goal_manager.decomposer
    if isinstance(decomposer, PromptFileDecomposer) and decomposer.last_prompt_file:
        console.print(f"\nPrompt saved to: [cyan]{decomposer.last_prompt_file}[/cyan]")
        console.print(
            "[dim]Follow the instructions in the file, then import the reply with "
            "'goalie breakdown <goal-id> --response <file>'.[/dim]"
        )
    console.print(f"[green]Created {len(tasks)} tasks for goal \"{escape(goal_name)}\"[/green]")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--goals-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help=f"Goals directory (overrides config and ${GOALS_DIR_ENV})",
)
@click.pass_context
def cli(ctx: click.Context, config: Path | None, goals_dir: Path | None) -> None:
    """Goalie - break goals into tasks and pick what to work on next."""
    ctx.ensure_object(dict)
    loaded_config = _load_config(config)
    _setup_logging(loaded_config)

    ctx.obj["config"] = loaded_config
    ctx.obj["repository"] = GoalRepository(_resolve_goals_dir(loaded_config, goals_dir))
    ctx.obj["display"] = DisplayManager(console)


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialize goalie in the current directory."""
    _goal_manager(ctx).init()
    console.print(f"[green]✓ Goalie initialized in {ctx.obj['repository'].goals_dir}[/green]")


@cli.command("create-goal")
@click.argument("name")
@click.option("--description", "-d", default=None, help="Goal description")
@click.option("--due-date", default=None, help="Due date (YYYY-MM-DD)")
@click.option("--skip-breakdown", is_flag=True, help="Create the goal without breaking it down")
@click.pass_context
def create_goal(
    ctx: click.Context,
    name: str,
    description: str | None,
    due_date: str | None,
    skip_breakdown: bool,
) -> None:
    """Create a new goal and break it down into tasks."""
    goal_manager = _goal_manager(ctx)
    try:
        goal = goal_manager.create_goal(name, description, due_date)
    except ValueError as e:
        _fail(ctx, e)
        return

    console.print(f"Goal \"{escape(goal.name)}\" created with ID: [cyan]{goal.id}[/cyan]")
    if skip_breakdown:
        return

    console.print("Breaking down goal into tasks...")
    tasks = goal_manager.breakdown_goal(goal.id)
    _report_breakdown(goal_manager, tasks, goal.name)


@cli.command()
@click.argument("goal_id")
@click.option(
    "--response",
    "response_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Import tasks from a saved assistant reply instead of writing a prompt file",
)
@click.pass_context
def breakdown(ctx: click.Context, goal_id: str, response_file: Path | None) -> None:
    """Break a goal down into tasks."""
    decomposer = ResponseFileDecomposer(response_file) if response_file else None
    goal_manager = _goal_manager(ctx, decomposer)
    try:
        tasks = goal_manager.breakdown_goal(goal_id)
    except GoalieError as e:
        _fail(ctx, e)
        return

    goal = goal_manager.get_goal(goal_id)
    _report_breakdown(goal_manager, tasks, goal.name if goal else goal_id)


@cli.command("list-goals")
@click.pass_context
def list_goals(ctx: click.Context) -> None:
    """List all goals with completion status."""
    goals = _goal_manager(ctx).list_goals()
    ctx.obj["display"].show_goals(goals)


@cli.command("list-tasks")
@click.argument("goal_id")
@click.option("--available", is_flag=True, help="Only tasks that can be started now")
@click.pass_context
def list_tasks(ctx: click.Context, goal_id: str, available: bool) -> None:
    """List tasks for a goal."""
    task_manager = _task_manager(ctx)
    if available:
        tasks = task_manager.get_available_tasks(goal_id)
        title = f"Available tasks for goal {goal_id}"
    else:
        tasks = task_manager.get_tasks_for_goal(goal_id)
        title = f"Tasks for goal {goal_id}"
    ctx.obj["display"].show_tasks(tasks, title=title)


@cli.command()
@click.option("--goal", "-g", "goal_id", default=None, help="Specific goal ID to work on")
@click.pass_context
def work(ctx: click.Context, goal_id: str | None) -> None:
    """Get the recommended task to work on."""
    task = _task_manager(ctx).get_recommended_task(goal_id)
    if task:
        ctx.obj["display"].show_task(task, title="Recommended task")
    else:
        console.print("[yellow]No tasks available to work on.[/yellow]")


@cli.command("complete-task")
@click.argument("task_id")
@click.pass_context
def complete_task(ctx: click.Context, task_id: str) -> None:
    """Mark a task as completed."""
    try:
        _task_manager(ctx).complete_task(task_id)
    except GoalieError as e:
        _fail(ctx, e)
        return
    console.print(f"[green]✓ Task {task_id} marked as completed.[/green]")


@cli.command("set-status")
@click.argument("goal_id")
@click.argument("task_id")
@click.argument("status", type=click.Choice([s.value for s in TaskStatus], case_sensitive=False))
@click.pass_context
def set_status(ctx: click.Context, goal_id: str, task_id: str, status: str) -> None:
    """Set a task's status."""
    try:
        task = _task_manager(ctx).update_task_status(goal_id, task_id, status.lower())
    except GoalieError as e:
        _fail(ctx, e)
        return
    console.print(f"[green]✓ Task {task.id} is now {task.status.value}.[/green]")


@cli.command("add-subtask")
@click.argument("goal_id")
@click.argument("parent_task_id")
@click.option("--title", "-t", default=None, help="Subtask title")
@click.option("--description", "-d", default=None, help="Subtask description")
@click.option(
    "--priority",
    "-p",
    type=click.Choice([p.value for p in TaskPriority], case_sensitive=False),
    default=None,
    help="Priority (default: parent's)",
)
@click.option("--difficulty", type=int, default=None, help="Difficulty 1-10 (default: parent's)")
@click.option("--time", "time_estimate", type=int, default=None, help="Time estimate in minutes (default: 30)")
@click.pass_context
def add_subtask(
    ctx: click.Context,
    goal_id: str,
    parent_task_id: str,
    title: str | None,
    description: str | None,
    priority: str | None,
    difficulty: int | None,
    time_estimate: int | None,
) -> None:
    """Create a subtask under an existing task."""
    try:
        subtask = _task_manager(ctx).create_subtask(
            goal_id,
            parent_task_id,
            title=title,
            description=description,
            priority=priority.lower() if priority else None,
            difficulty=difficulty,
            time_estimate=time_estimate,
        )
    except GoalieError as e:
        _fail(ctx, e)
        return
    console.print(f"[green]✓ Created subtask {subtask.id}: {escape(subtask.title)}[/green]")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show overall status and progress."""
    goals = _goal_manager(ctx).list_goals()
    recommended = _task_manager(ctx).get_recommended_task()
    ctx.obj["display"].show_status(goals, recommended)


@cli.command()
@click.pass_context
def tui(ctx: click.Context) -> None:
    """Launch the interactive terminal interface."""
    from goalie.tui import GoalieTUI

    history_file = ctx.obj["config"].get("tui", {}).get("history_file")
    GoalieTUI(_goal_manager(ctx), _task_manager(ctx), console=console, history_file=history_file).run()


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)
    except (GoalieError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
