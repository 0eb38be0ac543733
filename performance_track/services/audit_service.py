"""Audit service - append-only record of workflow events."""
from datetime import datetime
from typing import Optional

from performance_track.models.audit_log import AuditLog


class AuditService:
    """Service for writing and searching audit records."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.audit_logs = db["audit_logs"]

    def _doc_to_audit_log(self, doc: dict) -> AuditLog:
        """Convert database document to AuditLog model."""
        return AuditLog(
            _id=str(doc["_id"]),
            user_id=doc.get("user_id"),
            action=doc["action"],
            details=doc.get("details", ""),
            related_entity_type=doc.get("related_entity_type"),
            related_entity_id=doc.get("related_entity_id"),
            status=doc.get("status", "SUCCESS"),
            timestamp=doc["timestamp"],
        )

    async def record(
        self,
        actor_id: Optional[str],
        action: str,
        details: str,
        entity_type: Optional[str],
        entity_id: Optional[str],
        outcome: str = "SUCCESS",
    ) -> AuditLog:
        """
        Append an audit record.

        Args:
            actor_id: User who performed the action
            action: Machine-readable action name, e.g. GOAL_APPROVED
            details: Human-readable description
            entity_type: Type of the affected entity, e.g. Goal
            entity_id: ID of the affected entity
            outcome: Result of the action (defaults to SUCCESS)

        Returns:
            The stored audit record
        """
        doc = {
            "user_id": actor_id,
            "action": action,
            "details": details,
            "related_entity_type": entity_type,
            "related_entity_id": entity_id,
            "status": outcome or "SUCCESS",
            "timestamp": datetime.utcnow(),
        }

        result = await self.audit_logs.insert_one(doc)
        doc["_id"] = result.inserted_id

        return self._doc_to_audit_log(doc)

    async def list_audit_logs(
        self,
        user_id: Optional[str] = None,
        action: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[AuditLog]:
        """
        Search audit records, newest first.

        Filters combine; a date range needs both ends.
        """
        query = {}

        if user_id:
            query["user_id"] = user_id
        if action:
            query["action"] = action
        if start and end:
            query["timestamp"] = {"$gte": start, "$lte": end}

        cursor = self.audit_logs.find(query).sort("timestamp", -1)
        docs = await cursor.to_list(length=None)

        return [self._doc_to_audit_log(doc) for doc in docs]
