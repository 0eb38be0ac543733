"""Reminder service - nudges managers about goals waiting on them.

Only reads goals and writes notifications; goal state is never touched.
"""
import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from performance_track.config import settings
from performance_track.models.goal import GoalStatus
from performance_track.models.notification import NotificationType
from performance_track.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class ReminderService:
    """Service for periodic reminder digests."""

    def __init__(self, db, notifications: Optional[NotificationService] = None):
        """Initialize service with database connection."""
        self.db = db
        self.goals = db["goals"]
        self.notifications = notifications or NotificationService(db)

    async def _count_by_manager(self, status: GoalStatus, date_field: str, before: datetime) -> Counter:
        cursor = self.goals.find(
            {"status": status.value, date_field: {"$lt": before}},
            {"assigned_manager": 1},
        )
        goal_docs = await cursor.to_list(length=None)
        return Counter(doc["assigned_manager"]["id"] for doc in goal_docs)

    async def _send_digests(self, counts: Counter, message_template: str) -> int:
        """Send one digest per manager; a failed send is logged and skipped."""
        sent = 0
        for manager_id, count in counts.items():
            try:
                await self.notifications.send_notification(
                    manager_id,
                    NotificationType.REVIEW_REMINDER,
                    message_template.format(count=count),
                    "Goal",
                    None,
                    "HIGH",
                    True,
                )
            except Exception:
                logger.exception("Failed to send reminder to manager %s", manager_id)
                continue
            sent += 1
        return sent

    async def send_pending_approval_reminders(self, now: Optional[datetime] = None) -> int:
        """
        Remind managers of goals left PENDING for too long.

        Returns:
            Number of managers notified
        """
        days = settings.pending_approval_reminder_days
        cutoff = (now or datetime.utcnow()) - timedelta(days=days)
        logger.info("Running: pending approval reminders")

        counts = await self._count_by_manager(GoalStatus.PENDING, "created_at", cutoff)
        notified = await self._send_digests(
            counts,
            "You have {count} goal(s) pending approval for over " + f"{days} days",
        )

        logger.info("Completed: pending approval reminders. Notified %d managers", notified)
        return notified

    async def send_pending_completion_reminders(self, now: Optional[datetime] = None) -> int:
        """
        Remind managers of completion submissions waiting for a decision.

        Returns:
            Number of managers notified
        """
        days = settings.pending_completion_reminder_days
        cutoff = (now or datetime.utcnow()) - timedelta(days=days)
        logger.info("Running: pending completion reminders")

        counts = await self._count_by_manager(
            GoalStatus.PENDING_COMPLETION_APPROVAL,
            "completion_submitted_date",
            cutoff,
        )
        notified = await self._send_digests(
            counts,
            "You have {count} goal(s) pending completion approval for over " + f"{days} days",
        )

        logger.info("Completed: pending completion reminders. Notified %d managers", notified)
        return notified
