"""Rich rendering of goals and tasks."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from goalie.goals.models import Goal, GoalStatus
from goalie.tasks.models import Task, TaskStatus

STATUS_STYLES = {
    TaskStatus.TODO: "white",
    TaskStatus.IN_PROGRESS: "yellow",
    TaskStatus.COMPLETED: "green",
}

GOAL_STATUS_STYLES = {
    GoalStatus.ACTIVE: "cyan",
    GoalStatus.PAUSED: "yellow",
    GoalStatus.COMPLETED: "green",
}

PRIORITY_SYMBOLS = {
    "high": "🔴",
    "medium": "🟡",
    "low": "🟢",
}


class DisplayManager:
    """Renders goal and task views on a rich Console."""

    def __init__(self, console: Console | None = None):
        """
        Initialize display manager.

        Args:
            console: Rich Console instance (creates new if None)
        """
        self.console = console or Console()

    def show_goals(self, goals: list[Goal], numbered: bool = False) -> None:
        """
        Display goals with their completion.

        Args:
            goals: Goals to list
            numbered: Prefix rows with a 1-based selection number
        """
        if not goals:
            self.console.print("[yellow]No goals found[/yellow]")
            return

        table = Table(title="🎯 Goals", show_header=True, header_style="bold magenta")
        if numbered:
            table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="bold")
        table.add_column("ID", style="cyan")
        table.add_column("Status")
        table.add_column("Done", justify="right", style="green")
        table.add_column("Due", style="yellow")

        for index, goal in enumerate(goals, start=1):
            style = GOAL_STATUS_STYLES.get(goal.status, "white")
            row = [
                escape(goal.name),
                goal.id,
                f"[{style}]{goal.status.value}[/{style}]",
                f"{goal.completion_percentage}%",
                goal.due_date.isoformat() if goal.due_date else "",
            ]
            if numbered:
                row.insert(0, str(index))
            table.add_row(*row)

        self.console.print(table)

    def show_tasks(self, tasks: list[Task], title: str = "Tasks", numbered: bool = False) -> None:
        """
        Display tasks as a table.

        Args:
            tasks: Tasks to list
            title: Table title
            numbered: Prefix rows with a 1-based selection number
        """
        if not tasks:
            self.console.print("[yellow]No tasks found[/yellow]")
            return

        table = Table(title=title, show_header=True, header_style="bold magenta")
        if numbered:
            table.add_column("#", justify="right", style="dim")
        table.add_column("ID", style="cyan")
        table.add_column("", width=2)
        table.add_column("Title")
        table.add_column("Status")
        table.add_column("Difficulty", justify="right")
        table.add_column("Time", justify="right")
        table.add_column("Depends on", style="dim")

        for index, task in enumerate(tasks, start=1):
            style = STATUS_STYLES.get(task.status, "white")
            row = [
                task.id,
                PRIORITY_SYMBOLS.get(task.priority.value, "⚪"),
                escape(task.title),
                f"[{style}]{task.status.value}[/{style}]",
                f"{task.difficulty}/10",
                f"{task.time_estimate}min",
                ", ".join(task.dependencies),
            ]
            if numbered:
                row.insert(0, str(index))
            table.add_row(*row)

        self.console.print(table)

    def show_task(self, task: Task, title: str = "Task") -> None:
        """Display one task in a panel."""
        lines = [
            f"[bold]{escape(task.title)}[/bold] [dim]({task.id})[/dim]",
        ]
        if task.description:
            lines.append(escape(task.description))
        lines.append("")
        lines.append(
            f"Priority: {task.priority.value}, Difficulty: {task.difficulty}/10, "
            f"Estimated time: {task.time_estimate} minutes"
        )
        if task.due_date:
            lines.append(f"Due: {task.due_date.isoformat()}")
        if task.parent_task:
            lines.append(f"Subtask of: {task.parent_task}")

        self.console.print(Panel("\n".join(lines), title=f"[bold green]{title}[/bold green]", border_style="green"))

    def show_status(self, goals: list[Goal], recommended: Optional[Task]) -> None:
        """Display overall progress and the next recommended task."""
        active = [g for g in goals if g.status == GoalStatus.ACTIVE]
        completed = [g for g in goals if g.status == GoalStatus.COMPLETED]

        summary = (
            f"Total Goals: {len(goals)}\n"
            f"Active Goals: {len(active)}\n"
            f"Completed Goals: {len(completed)}"
        )
        self.console.print(Panel(summary, title="[bold cyan]Goalie Status[/bold cyan]", border_style="cyan"))

        if not active:
            return

        table = Table(title="Active Goals Progress", show_header=True, header_style="bold magenta")
        table.add_column("Goal", style="bold")
        table.add_column("Done", justify="right", style="green")
        for goal in active:
            table.add_row(escape(goal.name), f"{goal.completion_percentage}%")
        self.console.print(table)

        if recommended:
            self.show_task(recommended, title="Recommended next task")
