"""Goal service - the goal lifecycle workflow.

Every operation follows the same order: load the goal, check the actor's
relation to it, check the lifecycle precondition, then write the goal
together with any decision or feedback record in one transaction. Audit
and notification side effects run after the write has committed and never
undo it.
"""
import logging
from datetime import date, datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

from performance_track.database import transaction
from performance_track.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from performance_track.models.completion_approval import ApprovalDecision, GoalCompletionApproval
from performance_track.models.feedback import Feedback, FeedbackType
from performance_track.models.goal import (
    CompletionApprovalStatus,
    CompletionSubmission,
    EvidenceVerificationStatus,
    Goal,
    GoalCreate,
    GoalPriority,
    GoalStatus,
    GoalUpdate,
    can_transition,
)
from performance_track.models.notification import NotificationType
from performance_track.models.user import UserRole
from performance_track.services.audit_service import AuditService
from performance_track.services.notification_service import NotificationService
from performance_track.utils.permissions import GoalRelation, can_delete, require_relation

logger = logging.getLogger(__name__)

ENTITY_TYPE = "Goal"
NO_PROGRESS_MESSAGE = "No progress updates yet"
DATE_FIELDS = ("start_date", "end_date")


def _date_to_datetime(value: date) -> datetime:
    """BSON has no date type; store dates as midnight datetimes."""
    return datetime.combine(value, datetime.min.time())


class GoalService:
    """Service for goal lifecycle operations."""

    def __init__(
        self,
        db,
        notifications: Optional[NotificationService] = None,
        audit: Optional[AuditService] = None,
    ):
        """Initialize service with database connection and side-effect collaborators."""
        self.db = db
        self.goals = db["goals"]
        self.users = db["users"]
        self.feedback = db["feedback"]
        self.completion_approvals = db["goal_completion_approvals"]
        self.notifications = notifications or NotificationService(db)
        self.audit = audit or AuditService(db)

    # ------------------------------------------------------------------
    # Conversion and loading helpers
    # ------------------------------------------------------------------

    def _doc_to_goal(self, doc: dict) -> Goal:
        """
        Convert database document to Goal model.

        Handles datetime to date conversion for the definition dates.
        """
        data = {key: value for key, value in doc.items() if key in Goal.model_fields}
        for field in DATE_FIELDS:
            if isinstance(data.get(field), datetime):
                data[field] = data[field].date()
        data["_id"] = str(doc["_id"])
        return Goal.model_validate(data)

    def _doc_to_feedback(self, doc: dict) -> Feedback:
        """Convert database document to Feedback model."""
        return Feedback(
            _id=str(doc["_id"]),
            goal_id=doc["goal_id"],
            given_by_user_id=doc["given_by_user_id"],
            comments=doc["comments"],
            feedback_type=doc["feedback_type"],
            date=doc["date"],
        )

    def _doc_to_approval(self, doc: dict) -> GoalCompletionApproval:
        """Convert database document to GoalCompletionApproval model."""
        return GoalCompletionApproval(
            _id=str(doc["_id"]),
            goal_id=doc["goal_id"],
            approval_decision=doc["approval_decision"],
            approved_by=doc["approved_by"],
            approval_date=doc["approval_date"],
            manager_comments=doc.get("manager_comments"),
            evidence_link_verified=doc["evidence_link_verified"],
            decision_rationale=doc["decision_rationale"],
        )

    async def _load_goal_doc(self, goal_id: str) -> dict:
        """
        Fetch a goal document by ID.

        Raises:
            NotFoundError: If the ID is malformed or no goal has it
        """
        try:
            object_id = ObjectId(goal_id)
        except (InvalidId, TypeError):
            raise NotFoundError("Goal not found")

        goal_doc = await self.goals.find_one({"_id": object_id})
        if not goal_doc:
            raise NotFoundError("Goal not found")

        return goal_doc

    async def _load_user_doc(self, user_id: str, missing_message: str) -> dict:
        """Fetch a user document by ID or raise NotFoundError."""
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            raise NotFoundError(missing_message)

        user_doc = await self.users.find_one({"_id": object_id})
        if not user_doc:
            raise NotFoundError(missing_message)

        return user_doc

    # ------------------------------------------------------------------
    # Precondition, persistence and side-effect helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_status(goal: Goal, expected: GoalStatus, message: str) -> None:
        if goal.status != expected:
            raise BadRequestError(message)

    @staticmethod
    def _require_transition(goal: Goal, target: GoalStatus) -> None:
        if not can_transition(goal.status, target):
            raise BadRequestError(
                f"Goal cannot move from {goal.status.value} to {target.value}"
            )

    @staticmethod
    def _validate_dates(start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise BadRequestError("End date must be after start date")

    async def _save(
        self,
        goal_doc: dict,
        changes: dict,
        records: tuple = (),
    ) -> Goal:
        """
        Apply ``changes`` to a goal and insert ``records`` as one unit.

        The new state is validated against the Goal invariants before
        anything is written. ``records`` holds ``(collection, document)``
        pairs; each document gets its ``_id`` set on insert.
        """
        changes["updated_at"] = datetime.utcnow()
        updated = self._doc_to_goal({**goal_doc, **changes})

        async with transaction(self.db) as session:
            await self.goals.update_one(
                {"_id": goal_doc["_id"]},
                {"$set": changes},
                session=session,
            )
            for collection, record in records:
                result = await collection.insert_one(record, session=session)
                record["_id"] = result.inserted_id

        goal_doc.update(changes)
        return updated

    async def _audit(self, actor_id: str, action: str, details: str, goal_id: str) -> None:
        """Record an audit entry; failures are logged, never raised."""
        try:
            await self.audit.record(actor_id, action, details, ENTITY_TYPE, goal_id)
        except Exception:
            logger.exception("Failed to record audit %s for goal %s", action, goal_id)

    async def _notify(
        self,
        user_id: str,
        type: NotificationType,
        message: str,
        goal_id: str,
        priority: str,
        action_required: bool,
    ) -> None:
        """Send a notification; failures are logged, never raised."""
        try:
            await self.notifications.send_notification(
                user_id,
                type,
                message,
                ENTITY_TYPE,
                goal_id,
                priority,
                action_required,
            )
        except Exception:
            logger.exception("Failed to send %s notification for goal %s", type, goal_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_goal(self, goal_id: str) -> Goal:
        """
        Get a single goal by ID.

        Raises:
            NotFoundError: If goal not found
        """
        return self._doc_to_goal(await self._load_goal_doc(goal_id))

    async def _list(self, query: dict, status: Optional[GoalStatus]) -> list[Goal]:
        if status:
            query["status"] = GoalStatus(status).value

        cursor = self.goals.find(query).sort("created_at", -1)
        goal_docs = await cursor.to_list(length=None)

        return [self._doc_to_goal(doc) for doc in goal_docs]

    async def list_goals_for_employee(
        self,
        user_id: str,
        status: Optional[GoalStatus] = None,
    ) -> list[Goal]:
        """List goals assigned to an employee, optionally by status."""
        return await self._list({"assigned_to_user.id": user_id}, status)

    async def list_goals_for_manager(
        self,
        manager_id: str,
        status: Optional[GoalStatus] = None,
    ) -> list[Goal]:
        """List goals a manager is responsible for, optionally by status."""
        return await self._list({"assigned_manager.id": manager_id}, status)

    async def list_completion_approvals(self, goal_id: str) -> list[GoalCompletionApproval]:
        """List the completion decisions made on a goal, oldest first."""
        await self._load_goal_doc(goal_id)

        cursor = self.completion_approvals.find({"goal_id": goal_id}).sort("approval_date", 1)
        docs = await cursor.to_list(length=None)

        return [self._doc_to_approval(doc) for doc in docs]

    async def list_feedback(self, goal_id: str) -> list[Feedback]:
        """List feedback left on a goal, oldest first."""
        await self._load_goal_doc(goal_id)

        cursor = self.feedback.find({"goal_id": goal_id}).sort("date", 1)
        docs = await cursor.to_list(length=None)

        return [self._doc_to_feedback(doc) for doc in docs]

    async def get_progress_updates(self, goal_id: str) -> str:
        """Return the goal's progress notes, or a placeholder when there are none."""
        goal = await self.get_goal(goal_id)
        return goal.progress_notes or NO_PROGRESS_MESSAGE

    # ------------------------------------------------------------------
    # Definition and initial approval
    # ------------------------------------------------------------------

    async def create_goal(self, goal_create: GoalCreate, employee_id: str) -> Goal:
        """
        Create a new goal in PENDING status and ask the manager to approve it.

        Args:
            goal_create: Goal definition including the manager ID
            employee_id: Employee who authors and owns the goal

        Returns:
            Created goal

        Raises:
            NotFoundError: If the employee or manager does not exist
            BadRequestError: If the dates are inverted or the employee names themselves
        """
        employee = await self._load_user_doc(employee_id, "Employee not found")
        manager = await self._load_user_doc(goal_create.manager_id, "Manager not found")

        self._validate_dates(goal_create.start_date, goal_create.end_date)
        if employee["_id"] == manager["_id"]:
            raise BadRequestError("A goal cannot be assigned to its own author as manager")

        now = datetime.utcnow()
        goal_doc = {
            "title": goal_create.title,
            "description": goal_create.description,
            "category": goal_create.category.value,
            "priority": goal_create.priority.value,
            "assigned_to_user": {"id": str(employee["_id"]), "name": employee["name"]},
            "assigned_manager": {"id": str(manager["_id"]), "name": manager["name"]},
            "start_date": _date_to_datetime(goal_create.start_date),
            "end_date": _date_to_datetime(goal_create.end_date),
            "status": GoalStatus.PENDING.value,
            "request_changes": False,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.goals.insert_one(goal_doc)
        goal_doc["_id"] = result.inserted_id
        goal = self._doc_to_goal(goal_doc)

        await self._notify(
            goal.assigned_manager.id,
            NotificationType.GOAL_SUBMITTED,
            f"{employee['name']} submitted goal: {goal.title}",
            goal.id,
            goal.priority.value,
            True,
        )
        await self._audit(employee_id, "GOAL_CREATED", f"Created goal: {goal.title}", goal.id)

        logger.info("Goal %s created by %s", goal.id, employee_id)
        return goal

    async def approve_goal(self, goal_id: str, manager_id: str) -> Goal:
        """
        Approve a pending goal, moving it to IN_PROGRESS.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor is not the goal's manager
            BadRequestError: If the goal is not PENDING
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, manager_id, GoalRelation.MANAGER, "Not authorized to approve this goal")
        self._require_status(goal, GoalStatus.PENDING, "Goal is not in pending status")
        self._require_transition(goal, GoalStatus.IN_PROGRESS)

        goal = await self._save(goal_doc, {
            "status": GoalStatus.IN_PROGRESS.value,
            "approved_by": manager_id,
            "approved_date": datetime.utcnow(),
            "request_changes": False,
        })

        await self._notify(
            goal.assigned_to_user.id,
            NotificationType.GOAL_APPROVED,
            f"Your goal '{goal.title}' has been approved",
            goal.id,
            goal.priority.value,
            False,
        )
        await self._audit(manager_id, "GOAL_APPROVED", f"Approved goal: {goal.title}", goal.id)

        return goal

    async def request_changes(self, goal_id: str, manager_id: str, comments: str) -> Goal:
        """
        Flag a goal for rework and leave CHANGE_REQUEST feedback.

        The top-level status is not changed.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor is not the goal's manager
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, manager_id, GoalRelation.MANAGER)

        now = datetime.utcnow()
        feedback_doc = {
            "goal_id": goal.id,
            "given_by_user_id": manager_id,
            "comments": comments,
            "feedback_type": FeedbackType.CHANGE_REQUEST.value,
            "date": now,
        }

        goal = await self._save(
            goal_doc,
            {
                "request_changes": True,
                "last_reviewed_by": manager_id,
                "last_reviewed_date": now,
            },
            records=((self.feedback, feedback_doc),),
        )

        await self._notify(
            goal.assigned_to_user.id,
            NotificationType.GOAL_CHANGE_REQUESTED,
            f"Changes requested for goal: {goal.title}",
            goal.id,
            "NORMAL",
            True,
        )
        await self._audit(
            manager_id,
            "GOAL_CHANGE_REQUESTED",
            f"Requested changes for goal: {goal.title}",
            goal.id,
        )

        return goal

    async def update_goal(self, goal_id: str, goal_update: GoalUpdate, employee_id: str) -> Goal:
        """
        Resubmit a goal definition after the manager requested changes.

        Clears the change request flag; the top-level status is left as is.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor does not own the goal
            BadRequestError: If no changes were requested or the dates are inverted
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, employee_id, GoalRelation.ASSIGNEE)
        if not goal.request_changes:
            raise BadRequestError("Goal is not in change request status")
        self._validate_dates(goal_update.start_date, goal_update.end_date)

        goal = await self._save(goal_doc, {
            "title": goal_update.title,
            "description": goal_update.description,
            "category": goal_update.category.value,
            "priority": goal_update.priority.value,
            "start_date": _date_to_datetime(goal_update.start_date),
            "end_date": _date_to_datetime(goal_update.end_date),
            "request_changes": False,
            "resubmitted_date": datetime.utcnow(),
        })

        await self._notify(
            goal.assigned_manager.id,
            NotificationType.GOAL_RESUBMITTED,
            f"{goal.assigned_to_user.name} updated and resubmitted goal: {goal.title}",
            goal.id,
            "NORMAL",
            True,
        )
        await self._audit(
            employee_id,
            "GOAL_UPDATED",
            f"Updated and resubmitted goal: {goal.title}",
            goal.id,
        )

        return goal

    # ------------------------------------------------------------------
    # Work and completion
    # ------------------------------------------------------------------

    async def add_progress_update(self, goal_id: str, employee_id: str, note: str) -> Goal:
        """
        Append a timestamped note to the goal's progress log.

        Earlier notes are never rewritten.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor does not own the goal
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, employee_id, GoalRelation.ASSIGNEE)

        new_note = f"{datetime.utcnow().isoformat()}: {note}"
        if goal.progress_notes:
            progress_notes = f"{goal.progress_notes}\n{new_note}"
        else:
            progress_notes = new_note

        goal = await self._save(goal_doc, {"progress_notes": progress_notes})

        await self._audit(
            employee_id,
            "PROGRESS_ADDED",
            f"Added progress update for goal: {goal.title}",
            goal.id,
        )

        return goal

    async def submit_completion(
        self,
        goal_id: str,
        submission: CompletionSubmission,
        employee_id: str,
    ) -> Goal:
        """
        Submit evidence that an in-progress goal is done.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor does not own the goal
            BadRequestError: If the goal is not IN_PROGRESS
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, employee_id, GoalRelation.ASSIGNEE)
        self._require_status(goal, GoalStatus.IN_PROGRESS, "Goal is not in progress")
        self._require_transition(goal, GoalStatus.PENDING_COMPLETION_APPROVAL)

        goal = await self._save(goal_doc, {
            "status": GoalStatus.PENDING_COMPLETION_APPROVAL.value,
            "evidence_link": submission.evidence_link,
            "evidence_link_description": submission.evidence_link_description,
            "evidence_access_instructions": submission.evidence_access_instructions,
            "completion_notes": submission.completion_notes,
            "completion_submitted_date": datetime.utcnow(),
            "completion_approval_status": CompletionApprovalStatus.PENDING.value,
            "evidence_link_verification_status": EvidenceVerificationStatus.NOT_VERIFIED.value,
        })

        await self._notify(
            goal.assigned_manager.id,
            NotificationType.GOAL_COMPLETION_SUBMITTED,
            f"{goal.assigned_to_user.name} submitted completion for: {goal.title}",
            goal.id,
            GoalPriority.HIGH.value,
            True,
        )
        await self._audit(employee_id, "GOAL_COMPLETION_SUBMITTED", "Submitted completion", goal.id)

        return goal

    async def approve_completion(
        self,
        goal_id: str,
        manager_comments: Optional[str],
        manager_id: str,
    ) -> Goal:
        """
        Accept a completion submission and close the goal.

        Writes an APPROVED decision record in the same transaction.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor is not the goal's manager
            BadRequestError: If the goal is not PENDING_COMPLETION_APPROVAL
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, manager_id, GoalRelation.MANAGER)
        self._require_status(
            goal,
            GoalStatus.PENDING_COMPLETION_APPROVAL,
            "Goal is not pending completion approval",
        )
        self._require_transition(goal, GoalStatus.COMPLETED)

        now = datetime.utcnow()
        approval_doc = {
            "goal_id": goal.id,
            "approval_decision": ApprovalDecision.APPROVED.value,
            "approved_by": manager_id,
            "approval_date": now,
            "manager_comments": manager_comments,
            "evidence_link_verified": True,
            "decision_rationale": "Evidence verified and goal completion approved",
        }

        goal = await self._save(
            goal_doc,
            {
                "status": GoalStatus.COMPLETED.value,
                "completion_approval_status": CompletionApprovalStatus.APPROVED.value,
                "completion_approved_by": manager_id,
                "completion_approved_date": now,
                "final_completion_date": now,
                "manager_completion_comments": manager_comments,
                "evidence_link_verification_status": EvidenceVerificationStatus.VERIFIED.value,
                "evidence_link_verified_by": manager_id,
                "evidence_link_verified_date": now,
            },
            records=((self.completion_approvals, approval_doc),),
        )

        await self._notify(
            goal.assigned_to_user.id,
            NotificationType.GOAL_COMPLETION_APPROVED,
            f"Your goal '{goal.title}' completion has been approved!",
            goal.id,
            GoalPriority.HIGH.value,
            False,
        )
        await self._audit(
            manager_id,
            "GOAL_COMPLETION_APPROVED",
            f"Approved completion for goal: {goal.title}",
            goal.id,
        )

        return goal

    async def reject_completion(self, goal_id: str, reason: str, manager_id: str) -> Goal:
        """
        Send a completion submission back; the goal returns to IN_PROGRESS.

        Writes a REJECTED decision record in the same transaction.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor is not the goal's manager
            BadRequestError: If the goal is not PENDING_COMPLETION_APPROVAL
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, manager_id, GoalRelation.MANAGER)
        self._require_status(
            goal,
            GoalStatus.PENDING_COMPLETION_APPROVAL,
            "Goal is not pending completion approval",
        )
        self._require_transition(goal, GoalStatus.IN_PROGRESS)

        approval_doc = {
            "goal_id": goal.id,
            "approval_decision": ApprovalDecision.REJECTED.value,
            "approved_by": manager_id,
            "approval_date": datetime.utcnow(),
            "manager_comments": reason,
            "evidence_link_verified": False,
            "decision_rationale": "Goal completion rejected",
        }

        goal = await self._save(
            goal_doc,
            {
                "status": GoalStatus.IN_PROGRESS.value,
                "completion_approval_status": CompletionApprovalStatus.REJECTED.value,
                "manager_completion_comments": reason,
            },
            records=((self.completion_approvals, approval_doc),),
        )

        await self._notify(
            goal.assigned_to_user.id,
            NotificationType.GOAL_COMPLETION_REJECTED,
            f"Your goal '{goal.title}' completion was rejected. Please review feedback.",
            goal.id,
            GoalPriority.HIGH.value,
            True,
        )
        await self._audit(
            manager_id,
            "GOAL_COMPLETION_REJECTED",
            f"Rejected completion for goal: {goal.title}",
            goal.id,
        )

        return goal

    async def request_additional_evidence(self, goal_id: str, reason: str, manager_id: str) -> Goal:
        """
        Ask the employee for more evidence without leaving PENDING_COMPLETION_APPROVAL.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor is not the goal's manager
            BadRequestError: If the goal is not PENDING_COMPLETION_APPROVAL
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, manager_id, GoalRelation.MANAGER)
        self._require_status(
            goal,
            GoalStatus.PENDING_COMPLETION_APPROVAL,
            "Goal is not pending completion approval",
        )

        goal = await self._save(goal_doc, {
            "completion_approval_status": CompletionApprovalStatus.ADDITIONAL_EVIDENCE_REQUIRED.value,
            "evidence_link_verification_status": EvidenceVerificationStatus.NEEDS_ADDITIONAL_LINK.value,
            "evidence_link_verification_notes": reason,
        })

        await self._notify(
            goal.assigned_to_user.id,
            NotificationType.ADDITIONAL_EVIDENCE_REQUIRED,
            f"Additional evidence needed for goal: {goal.title}",
            goal.id,
            "NORMAL",
            True,
        )
        await self._audit(manager_id, "ADDITIONAL_EVIDENCE_REQUESTED", "Requested additional evidence", goal.id)

        return goal

    async def verify_evidence(
        self,
        goal_id: str,
        status_token: str,
        notes: Optional[str],
        manager_id: str,
    ) -> Goal:
        """
        Record the manager's verdict on the evidence link.

        ``status_token`` is matched case-insensitively against
        EvidenceVerificationStatus. No notification is sent.

        Only allowed while a completion submission is open
        (PENDING_COMPLETION_APPROVAL). Evidence sub-status is never
        changed on a goal that has no submitted evidence, even though
        the verdict itself does not move the goal's status.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If the actor is not the goal's manager
            BadRequestError: If the goal is not PENDING_COMPLETION_APPROVAL or the token is unknown
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        require_relation(goal, manager_id, GoalRelation.MANAGER)
        self._require_status(
            goal,
            GoalStatus.PENDING_COMPLETION_APPROVAL,
            "Goal is not pending completion approval",
        )

        try:
            verification_status = EvidenceVerificationStatus((status_token or "").strip().upper())
        except ValueError:
            raise BadRequestError(f"Invalid verification status: {status_token}")

        goal = await self._save(goal_doc, {
            "evidence_link_verification_status": verification_status.value,
            "evidence_link_verification_notes": notes,
            "evidence_link_verified_by": manager_id,
            "evidence_link_verified_date": datetime.utcnow(),
        })

        await self._audit(
            manager_id,
            "EVIDENCE_VERIFIED",
            f"Verified evidence for goal: {goal.title} - Status: {verification_status.value}",
            goal.id,
        )

        return goal

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    async def delete_goal(self, goal_id: str, actor_id: str, actor_role: UserRole) -> Goal:
        """
        Soft delete a goal by marking it REJECTED.

        Employees may delete only their own goals; managers and admins may
        delete any goal. Deleting an already rejected goal is allowed and
        audited again.

        Raises:
            NotFoundError: If goal not found
            UnauthorizedError: If an employee tries to delete someone else's goal
            BadRequestError: If the goal is already COMPLETED
        """
        goal_doc = await self._load_goal_doc(goal_id)
        goal = self._doc_to_goal(goal_doc)

        if not can_delete(goal, actor_id, actor_role):
            raise UnauthorizedError("Not authorized to delete this goal")
        self._require_transition(goal, GoalStatus.REJECTED)

        goal = await self._save(goal_doc, {"status": GoalStatus.REJECTED.value})

        await self._audit(actor_id, "GOAL_DELETED", f"Deleted goal: {goal.title}", goal.id)

        logger.info("Goal %s soft deleted by %s", goal.id, actor_id)
        return goal
