"""Feedback model definitions."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class FeedbackType(str, Enum):
    """Feedback tags."""

    CHANGE_REQUEST = "CHANGE_REQUEST"


class Feedback(BaseModel):
    """Manager feedback left on a goal. Never edited after creation."""

    id: str = Field(alias="_id", serialization_alias="id")
    goal_id: str
    given_by_user_id: str
    comments: str
    feedback_type: FeedbackType
    date: datetime

    model_config = {"populate_by_name": True, "frozen": True}
