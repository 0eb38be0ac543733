"""Notification service - stores notifications and pushes them live."""
import asyncio
import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

from performance_track.exceptions import NotFoundError
from performance_track.models.notification import (
    Notification,
    NotificationStatus,
    NotificationType,
)

logger = logging.getLogger(__name__)


class NotificationBroker:
    """In-process fan-out of new notifications to connected listeners."""

    def __init__(self):
        self._queues: dict[str, set[asyncio.Queue]] = defaultdict(set)

    def subscribe(self, user_id: str) -> asyncio.Queue:
        """Register a listener for a user and return its queue."""
        queue: asyncio.Queue = asyncio.Queue()
        self._queues[user_id].add(queue)
        return queue

    def unsubscribe(self, user_id: str, queue: asyncio.Queue) -> None:
        """Remove a listener."""
        listeners = self._queues.get(user_id)
        if not listeners:
            return
        listeners.discard(queue)
        if not listeners:
            del self._queues[user_id]

    def publish(self, user_id: str, notification: Notification) -> int:
        """Push a notification to every listener of the user."""
        listeners = self._queues.get(user_id, ())
        for queue in listeners:
            queue.put_nowait(notification)
        return len(listeners)


# Global broker shared by the app and its streaming endpoint
broker = NotificationBroker()


class NotificationService:
    """Service for handling notification operations."""

    def __init__(self, db, notification_broker: Optional[NotificationBroker] = None):
        """Initialize service with database connection."""
        self.db = db
        self.notifications = db["notifications"]
        self.broker = notification_broker or broker

    def _doc_to_notification(self, doc: dict) -> Notification:
        """Convert database document to Notification model."""
        return Notification(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            type=doc["type"],
            message=doc["message"],
            related_entity_type=doc.get("related_entity_type"),
            related_entity_id=doc.get("related_entity_id"),
            status=doc.get("status", NotificationStatus.UNREAD.value),
            priority=doc.get("priority", "NORMAL"),
            action_required=doc.get("action_required", False),
            created_at=doc["created_at"],
            read_date=doc.get("read_date"),
        )

    async def send_notification(
        self,
        user_id: str,
        type: NotificationType,
        message: str,
        entity_type: Optional[str],
        entity_id: Optional[str],
        priority: Optional[str] = None,
        action_required: bool = False,
    ) -> Notification:
        """
        Store a notification for a user and push it to live listeners.

        Args:
            user_id: Recipient
            type: Notification type
            message: Text shown to the user
            entity_type: Type of the related entity, e.g. Goal
            entity_id: ID of the related entity (None for digests)
            priority: Priority label (defaults to NORMAL)
            action_required: Whether the recipient has to act

        Returns:
            The stored notification
        """
        doc = {
            "user_id": user_id,
            "type": NotificationType(type).value,
            "message": message,
            "related_entity_type": entity_type,
            "related_entity_id": entity_id,
            "status": NotificationStatus.UNREAD.value,
            "priority": priority or "NORMAL",
            "action_required": action_required,
            "created_at": datetime.utcnow(),
            "read_date": None,
        }

        result = await self.notifications.insert_one(doc)
        doc["_id"] = result.inserted_id
        notification = self._doc_to_notification(doc)

        delivered = self.broker.publish(user_id, notification)
        logger.debug("Notification %s pushed to %d listener(s)", notification.id, delivered)

        return notification

    async def list_notifications(
        self,
        user_id: str,
        status: Optional[NotificationStatus] = None,
    ) -> list[Notification]:
        """List a user's notifications, newest first."""
        query = {"user_id": user_id}
        if status:
            query["status"] = NotificationStatus(status).value

        cursor = self.notifications.find(query).sort("created_at", -1)
        docs = await cursor.to_list(length=None)

        return [self._doc_to_notification(doc) for doc in docs]

    async def mark_as_read(self, user_id: str, notification_id: str) -> Notification:
        """
        Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or is not the user's
        """
        try:
            object_id = ObjectId(notification_id)
        except (InvalidId, TypeError):
            raise NotFoundError("Notification not found")

        doc = await self.notifications.find_one({"_id": object_id, "user_id": user_id})
        if not doc:
            raise NotFoundError("Notification not found")

        update_doc = {
            "status": NotificationStatus.READ.value,
            "read_date": datetime.utcnow(),
        }
        await self.notifications.update_one({"_id": object_id}, {"$set": update_doc})
        doc.update(update_doc)

        return self._doc_to_notification(doc)

    async def mark_all_as_read(self, user_id: str) -> dict:
        """Mark every unread notification of the user as read."""
        result = await self.notifications.update_many(
            {"user_id": user_id, "status": NotificationStatus.UNREAD.value},
            {
                "$set": {
                    "status": NotificationStatus.READ.value,
                    "read_date": datetime.utcnow(),
                }
            },
        )

        return {"updated_count": result.modified_count}
