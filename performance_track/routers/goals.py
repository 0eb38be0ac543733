"""Goal router - API endpoints for the goal lifecycle."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from performance_track.database import get_database
from performance_track.exceptions import UnauthorizedError
from performance_track.models.completion_approval import GoalCompletionApproval
from performance_track.models.feedback import Feedback
from performance_track.models.goal import (
    CompletionSubmission,
    Goal,
    GoalCreate,
    GoalStatus,
    GoalUpdate,
)
from performance_track.models.user import CurrentUser, UserRole
from performance_track.routers.auth import get_current_user
from performance_track.services.goal_service import GoalService
from performance_track.utils.permissions import GoalRelation, has_relation


router = APIRouter(prefix="/goals", tags=["goals"])


class CommentsRequest(BaseModel):
    """Manager comments for a change request."""

    comments: str = Field(min_length=1)


class ReasonRequest(BaseModel):
    """Reason given with a rejection or an evidence request."""

    reason: str = Field(min_length=1)


class ApproveCompletionRequest(BaseModel):
    """Optional closing comments from the manager."""

    manager_comments: Optional[str] = None


class VerifyEvidenceRequest(BaseModel):
    """Evidence verdict; status is one of EvidenceVerificationStatus (any case)."""

    status: str
    notes: Optional[str] = None


class ProgressRequest(BaseModel):
    """A single progress note."""

    note: str = Field(min_length=1)


class ProgressResponse(BaseModel):
    """All progress notes of a goal."""

    goal_id: str
    progress_notes: str


async def _get_visible_goal(service: GoalService, goal_id: str, current_user: CurrentUser) -> Goal:
    """Load a goal the caller may read: owner, manager, or admin."""
    goal = await service.get_goal(goal_id)
    if current_user.role == UserRole.ADMIN:
        return goal
    if has_relation(goal, current_user.id, GoalRelation.ASSIGNEE) or has_relation(
        goal, current_user.id, GoalRelation.MANAGER
    ):
        return goal
    raise UnauthorizedError("Not authorized to view this goal")


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: GoalCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """
    Create a goal owned by the caller.

    - Starts in PENDING
    - Notifies the named manager
    """
    service = GoalService(db)
    return await service.create_goal(goal_create=goal, employee_id=current_user.id)


@router.get("", response_model=list[Goal])
async def list_my_goals(
    goal_status: Optional[GoalStatus] = Query(None, alias="status", description="Filter by status"),
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """List goals assigned to the caller."""
    service = GoalService(db)
    return await service.list_goals_for_employee(current_user.id, status=goal_status)


@router.get("/team", response_model=list[Goal])
async def list_team_goals(
    goal_status: Optional[GoalStatus] = Query(None, alias="status", description="Filter by status"),
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """List goals the caller manages."""
    service = GoalService(db)
    return await service.list_goals_for_manager(current_user.id, status=goal_status)


@router.get("/{goal_id}", response_model=Goal)
async def get_goal(
    goal_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Get a single goal (owner, manager or admin)."""
    service = GoalService(db)
    return await _get_visible_goal(service, goal_id, current_user)


@router.put("/{goal_id}", response_model=Goal)
async def update_goal(
    goal_id: str,
    goal_update: GoalUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Resubmit a goal after the manager requested changes."""
    service = GoalService(db)
    return await service.update_goal(goal_id, goal_update, current_user.id)


@router.delete("/{goal_id}", response_model=Goal)
async def delete_goal(
    goal_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """
    Soft delete a goal.

    - Marks the goal REJECTED, the record is kept
    - Employees may only delete their own goals
    """
    service = GoalService(db)
    return await service.delete_goal(goal_id, current_user.id, current_user.role)


@router.post("/{goal_id}/approve", response_model=Goal)
async def approve_goal(
    goal_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Approve a pending goal (assigned manager only)."""
    service = GoalService(db)
    return await service.approve_goal(goal_id, current_user.id)


@router.post("/{goal_id}/request-changes", response_model=Goal)
async def request_changes(
    goal_id: str,
    body: CommentsRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Ask the employee to rework the goal definition."""
    service = GoalService(db)
    return await service.request_changes(goal_id, current_user.id, body.comments)


@router.post("/{goal_id}/progress", response_model=Goal)
async def add_progress(
    goal_id: str,
    body: ProgressRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Append a progress note (goal owner only)."""
    service = GoalService(db)
    return await service.add_progress_update(goal_id, current_user.id, body.note)


@router.get("/{goal_id}/progress", response_model=ProgressResponse)
async def get_progress(
    goal_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Get the progress log of a goal."""
    service = GoalService(db)
    goal = await _get_visible_goal(service, goal_id, current_user)
    notes = await service.get_progress_updates(goal.id)
    return ProgressResponse(goal_id=goal.id, progress_notes=notes)


@router.post("/{goal_id}/submit-completion", response_model=Goal)
async def submit_completion(
    goal_id: str,
    submission: CompletionSubmission,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Submit completion evidence for an in-progress goal."""
    service = GoalService(db)
    return await service.submit_completion(goal_id, submission, current_user.id)


@router.post("/{goal_id}/approve-completion", response_model=Goal)
async def approve_completion(
    goal_id: str,
    body: ApproveCompletionRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Approve a completion submission; the goal becomes COMPLETED."""
    service = GoalService(db)
    return await service.approve_completion(goal_id, body.manager_comments, current_user.id)


@router.post("/{goal_id}/reject-completion", response_model=Goal)
async def reject_completion(
    goal_id: str,
    body: ReasonRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Reject a completion submission; the goal returns to IN_PROGRESS."""
    service = GoalService(db)
    return await service.reject_completion(goal_id, body.reason, current_user.id)


@router.post("/{goal_id}/request-evidence", response_model=Goal)
async def request_additional_evidence(
    goal_id: str,
    body: ReasonRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Ask the employee for more completion evidence."""
    service = GoalService(db)
    return await service.request_additional_evidence(goal_id, body.reason, current_user.id)


@router.post("/{goal_id}/verify-evidence", response_model=Goal)
async def verify_evidence(
    goal_id: str,
    body: VerifyEvidenceRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Record the manager's verdict on the evidence link."""
    service = GoalService(db)
    return await service.verify_evidence(goal_id, body.status, body.notes, current_user.id)


@router.get("/{goal_id}/completion-approvals", response_model=list[GoalCompletionApproval])
async def list_completion_approvals(
    goal_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """List completion decisions made on a goal."""
    service = GoalService(db)
    goal = await _get_visible_goal(service, goal_id, current_user)
    return await service.list_completion_approvals(goal.id)


@router.get("/{goal_id}/feedback", response_model=list[Feedback])
async def list_feedback(
    goal_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """List manager feedback left on a goal."""
    service = GoalService(db)
    goal = await _get_visible_goal(service, goal_id, current_user)
    return await service.list_feedback(goal.id)
