"""Completion decision records (append-only)."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ApprovalDecision(str, Enum):
    """Outcome of a completion review."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class GoalCompletionApproval(BaseModel):
    """One manager decision on a goal completion submission."""

    id: str = Field(alias="_id", serialization_alias="id")
    goal_id: str
    approval_decision: ApprovalDecision
    approved_by: str
    approval_date: datetime
    manager_comments: Optional[str] = None
    evidence_link_verified: bool
    decision_rationale: str

    model_config = {"populate_by_name": True, "frozen": True}
