"""Authorization checks shared by every goal transition."""
from enum import Enum

from performance_track.exceptions import UnauthorizedError
from performance_track.models.goal import Goal
from performance_track.models.user import UserRole


class GoalRelation(str, Enum):
    """How an actor must relate to a goal to act on it."""

    ASSIGNEE = "assignee"
    MANAGER = "manager"


def has_relation(goal: Goal, actor_id: str, relation: GoalRelation) -> bool:
    """Return True if ``actor_id`` holds ``relation`` on ``goal``."""
    if relation == GoalRelation.MANAGER:
        return goal.assigned_manager.id == actor_id
    return goal.assigned_to_user.id == actor_id


def require_relation(
    goal: Goal,
    actor_id: str,
    relation: GoalRelation,
    message: str = "Not authorized",
) -> None:
    """
    Ensure the actor holds ``relation`` on the goal.

    Raises:
        UnauthorizedError: If the actor is not the goal's assignee/manager
    """
    if not has_relation(goal, actor_id, relation):
        raise UnauthorizedError(message)


def can_delete(goal: Goal, actor_id: str, role: UserRole) -> bool:
    """Employees may delete only their own goals; elevated roles any goal."""
    if UserRole(role).is_elevated:
        return True
    return has_relation(goal, actor_id, GoalRelation.ASSIGNEE)
