"""Interactive list-and-select terminal view."""

import html
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory, InMemoryHistory
from rich.console import Console
from rich.markup import escape

from goalie.display import DisplayManager
from goalie.errors import GoalieError
from goalie.goals.manager import GoalManager
from goalie.goals.models import Goal
from goalie.tasks.manager import TaskManager

HELP_TEXT = (
    "[dim]Enter a number to select, "
    "[bold]w[/bold] recommend, [bold]b[/bold] back, [bold]q[/bold] quit[/dim]"
)


class GoalieTUI:
    """
    Two-level browser: goals, then the selected goal's tasks.

    Selecting a task advances its status todo -> in_progress -> completed -> todo.
    """

    def __init__(
        self,
        goal_manager: GoalManager,
        task_manager: TaskManager,
        console: Console | None = None,
        history_file: Optional[str] = None,
    ) -> None:
        self.goal_manager = goal_manager
        self.task_manager = task_manager
        self.console = console or Console()
        self.display = DisplayManager(self.console)
        self.current_goal: Optional[Goal] = None

        if history_file:
            Path(history_file).parent.mkdir(parents=True, exist_ok=True)
            history = FileHistory(history_file)
        else:
            history = InMemoryHistory()
        self.session: PromptSession[str] = PromptSession(history=history)

    def run(self) -> None:
        """Main loop; returns when the user quits."""
        while True:
            self.render()
            try:
                user_input = self.session.prompt(self._prompt_text())
            except (EOFError, KeyboardInterrupt):
                break

            if not self.handle_input(user_input.strip().lower()):
                break

    def _prompt_text(self) -> HTML:
        if self.current_goal:
            return HTML(f"goalie [<b><ansicyan>{html.escape(self.current_goal.id)}</ansicyan></b>]> ")
        return HTML("goalie> ")

    def render(self) -> None:
        self.console.print()
        if self.current_goal:
            tasks = self.task_manager.get_tasks_for_goal(self.current_goal.id)
            self.display.show_tasks(tasks, title=f"Tasks: {escape(self.current_goal.name)}", numbered=True)
        else:
            self.display.show_goals(self.goal_manager.list_goals(), numbered=True)
        self.console.print(HELP_TEXT)

    def handle_input(self, command: str) -> bool:
        """
        Apply one command.

        Args:
            command: Stripped, lowercased user input

        Returns:
            False when the loop should stop
        """
        if command in ("q", "quit", "exit"):
            return False

        if command in ("b", "back"):
            self.current_goal = None
            return True

        if command in ("w", "work"):
            goal_id = self.current_goal.id if self.current_goal else None
            task = self.task_manager.get_recommended_task(goal_id)
            if task:
                self.display.show_task(task, title="Recommended task")
            else:
                self.console.print("[yellow]No tasks available to work on.[/yellow]")
            return True

        if not command.isdigit():
            if command:
                self.console.print(f"[yellow]Unknown command: {escape(command)}[/yellow]")
            return True

        index = int(command) - 1
        if self.current_goal:
            self._toggle_task(index)
        else:
            self._select_goal(index)
        return True

    def _select_goal(self, index: int) -> None:
        goals = self.goal_manager.list_goals()
        if not 0 <= index < len(goals):
            self.console.print("[yellow]No goal with that number[/yellow]")
            return
        self.current_goal = goals[index]

    def _toggle_task(self, index: int) -> None:
        tasks = self.task_manager.get_tasks_for_goal(self.current_goal.id)
        if not 0 <= index < len(tasks):
            self.console.print("[yellow]No task with that number[/yellow]")
            return

        try:
            task = self.task_manager.toggle_task_status(self.current_goal.id, tasks[index].id)
        except GoalieError as e:
            self.console.print(f"[red]Error:[/red] {escape(str(e))}")
            return
        self.console.print(f"[green]✓ {escape(task.title)} → {task.status.value}[/green]")
