"""Goal models and lifecycle."""

from goalie.goals.models import Goal, GoalStatus, generate_goal_id

__all__ = ["Goal", "GoalStatus", "generate_goal_id"]
