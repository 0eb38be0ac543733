"""Goal model definitions.

A goal carries one top-level lifecycle status plus two independent
sub-statuses (evidence verification and completion approval). The
sub-statuses stay unset until the goal has been submitted for completion.
"""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from performance_track.models.user import UserRef


class GoalStatus(str, Enum):
    """Top-level goal lifecycle states."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_COMPLETION_APPROVAL = "PENDING_COMPLETION_APPROVAL"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class GoalCategory(str, Enum):
    """Goal categories."""

    TECHNICAL = "TECHNICAL"
    BEHAVIORAL = "BEHAVIORAL"
    LEADERSHIP = "LEADERSHIP"
    PROFESSIONAL_DEVELOPMENT = "PROFESSIONAL_DEVELOPMENT"
    PERFORMANCE = "PERFORMANCE"
    OTHER = "OTHER"


class GoalPriority(str, Enum):
    """Goal priorities."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class EvidenceVerificationStatus(str, Enum):
    """Manager's verdict on the submitted evidence link."""

    NOT_VERIFIED = "NOT_VERIFIED"
    NEEDS_ADDITIONAL_LINK = "NEEDS_ADDITIONAL_LINK"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class CompletionApprovalStatus(str, Enum):
    """Manager's decision state on a completion submission."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ADDITIONAL_EVIDENCE_REQUIRED = "ADDITIONAL_EVIDENCE_REQUIRED"


# Legal lifecycle moves. Soft delete may be repeated on a rejected goal.
GOAL_TRANSITIONS: dict[GoalStatus, set[GoalStatus]] = {
    GoalStatus.PENDING: {GoalStatus.IN_PROGRESS, GoalStatus.REJECTED},
    GoalStatus.IN_PROGRESS: {
        GoalStatus.PENDING_COMPLETION_APPROVAL,
        GoalStatus.REJECTED,
    },
    GoalStatus.PENDING_COMPLETION_APPROVAL: {
        GoalStatus.COMPLETED,
        GoalStatus.IN_PROGRESS,
        GoalStatus.REJECTED,
    },
    GoalStatus.COMPLETED: set(),
    GoalStatus.REJECTED: {GoalStatus.REJECTED},
}


def can_transition(current: GoalStatus, target: GoalStatus) -> bool:
    """Return True if a goal in ``current`` may move to ``target``."""
    return target in GOAL_TRANSITIONS[current]


class GoalBase(BaseModel):
    """Employee-authored goal definition."""

    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    category: GoalCategory = GoalCategory.OTHER
    priority: GoalPriority = GoalPriority.MEDIUM
    start_date: date
    end_date: date


class GoalCreate(GoalBase):
    """Goal creation model."""

    manager_id: str


class GoalUpdate(GoalBase):
    """Goal resubmission model - replaces the whole definition."""

    pass


class CompletionSubmission(BaseModel):
    """Evidence an employee submits when claiming completion."""

    evidence_link: str = Field(min_length=1, max_length=500)
    evidence_link_description: str = ""
    evidence_access_instructions: str = ""
    completion_notes: str = ""


# Fields that only make sense once completion has been submitted
COMPLETION_FIELDS = (
    "evidence_link",
    "completion_submitted_date",
    "evidence_link_verification_status",
    "evidence_link_verified_by",
    "completion_approval_status",
    "completion_approved_by",
    "final_completion_date",
)


class Goal(GoalBase):
    """Full goal model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    assigned_to_user: UserRef
    assigned_manager: UserRef
    status: GoalStatus = GoalStatus.PENDING

    # Initial approval
    approved_by: Optional[str] = None
    approved_date: Optional[datetime] = None
    request_changes: bool = False
    last_reviewed_by: Optional[str] = None
    last_reviewed_date: Optional[datetime] = None
    resubmitted_date: Optional[datetime] = None

    # Work in progress
    progress_notes: Optional[str] = None

    # Completion submission
    evidence_link: Optional[str] = None
    evidence_link_description: Optional[str] = None
    evidence_access_instructions: Optional[str] = None
    completion_notes: Optional[str] = None
    completion_submitted_date: Optional[datetime] = None

    # Evidence verification
    evidence_link_verification_status: Optional[EvidenceVerificationStatus] = None
    evidence_link_verification_notes: Optional[str] = None
    evidence_link_verified_by: Optional[str] = None
    evidence_link_verified_date: Optional[datetime] = None

    # Completion approval
    completion_approval_status: Optional[CompletionApprovalStatus] = None
    completion_approved_by: Optional[str] = None
    completion_approved_date: Optional[datetime] = None
    final_completion_date: Optional[datetime] = None
    manager_completion_comments: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def check_invariants(self) -> "Goal":
        """Reject goal states the workflow can never produce."""
        if self.assigned_to_user.id == self.assigned_manager.id:
            raise ValueError("Goal owner and manager must be different users")
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        if self.status == GoalStatus.PENDING:
            populated = [name for name in COMPLETION_FIELDS if getattr(self, name) is not None]
            if populated:
                raise ValueError(
                    f"Completion fields cannot be set on a pending goal: {', '.join(populated)}"
                )
        return self
