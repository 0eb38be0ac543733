"""Audit log model definitions."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AuditLog(BaseModel):
    """Immutable record of who did what to which entity."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: Optional[str] = None
    action: str
    details: str = ""
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None
    status: str = "SUCCESS"
    timestamp: datetime

    model_config = {"populate_by_name": True, "frozen": True}
