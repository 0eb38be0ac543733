"""Notification model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """What a notification is about."""

    GOAL_SUBMITTED = "GOAL_SUBMITTED"
    GOAL_APPROVED = "GOAL_APPROVED"
    GOAL_CHANGE_REQUESTED = "GOAL_CHANGE_REQUESTED"
    GOAL_RESUBMITTED = "GOAL_RESUBMITTED"
    GOAL_COMPLETION_SUBMITTED = "GOAL_COMPLETION_SUBMITTED"
    GOAL_COMPLETION_APPROVED = "GOAL_COMPLETION_APPROVED"
    GOAL_COMPLETION_REJECTED = "GOAL_COMPLETION_REJECTED"
    ADDITIONAL_EVIDENCE_REQUIRED = "ADDITIONAL_EVIDENCE_REQUIRED"
    REVIEW_REMINDER = "REVIEW_REMINDER"


class NotificationStatus(str, Enum):
    """Read state."""

    UNREAD = "UNREAD"
    READ = "READ"


class Notification(BaseModel):
    """Notification delivered to a single user."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    type: NotificationType
    message: str
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None
    status: NotificationStatus = NotificationStatus.UNREAD
    priority: str = "NORMAL"
    action_required: bool = False
    created_at: datetime
    read_date: Optional[datetime] = None

    model_config = {"populate_by_name": True}
