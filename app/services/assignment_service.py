import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Optional
from app.core.config import settings
from app.core.errors import NotFoundError
from app.schemas.assignment import (
    ASSIGNMENT_STATUSES,
    Assignment,
    AssignmentCreate,
    AssignmentPage,
    AssignmentUpdate,
    UserRef,
)
from app.schemas.context import UserContext
from app.schemas.submission import AssignmentSubmissions, SubmissionView
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.services import projections

logger = logging.getLogger("assignment.service")


def create_assignment_id() -> str:
    return f"as-{uuid.uuid4().hex}"


def utcnow() -> datetime:
    # Mongo salva al millisecondo: tronchiamo per avere lo stesso valore in risposta
    ts = datetime.now(timezone.utc)
    return ts.replace(microsecond=(ts.microsecond // 1000) * 1000)


def _is_teacher(role):
    return role == "teacher"


def _is_student(role):
    return role == "student"


def _require_teacher(user: UserContext, action: str):
    if not _is_teacher(user.role):
        raise PermissionError(f"Only teachers can {action}")


def clamp_pagination(page: int, limit: int) -> tuple[int, int]:
    page = max(int(page), 1)
    limit = min(max(int(limit), 1), settings.max_page_limit)
    return page, limit


class AssignmentService:

    @staticmethod
    async def create_assignment(
        data: AssignmentCreate,
        user: UserContext,
        repo: AssignmentRepo
    ) -> Assignment:
        _require_teacher(user, "create assignments")

        now = utcnow()
        assignment = Assignment(
            assignmentId=create_assignment_id(),
            teacherId=str(user.user_id),
            teacher=UserRef(id=str(user.user_id), name=user.name, email=user.email),
            status="draft",
            submissions=[],
            createdAt=now,
            updatedAt=now,
            **data.model_dump(),
        )

        inserted_id = await repo.create(assignment)
        if not inserted_id:
            raise RuntimeError("Creazione assignment fallita")

        logger.info("Assignment %s creato da %s", inserted_id, user.user_id)
        return assignment

    @staticmethod
    async def list_assignments(
        user: UserContext,
        repo: AssignmentRepo,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = settings.default_page_limit,
    ) -> AssignmentPage:
        _require_teacher(user, "list assignments")

        # uno status sconosciuto viene ignorato, non è un errore
        if status not in ASSIGNMENT_STATUSES:
            status = None
        page, limit = clamp_pagination(page, limit)

        items, total = await repo.find_page_for_teacher(
            user.user_id, status, skip=(page - 1) * limit, limit=limit
        )
        return AssignmentPage(
            assignments=list(items),
            totalPages=math.ceil(total / limit),
            currentPage=page,
            total=total,
        )

    @staticmethod
    async def get_assignment(assignment_id: str, user: UserContext, repo: AssignmentRepo) -> Assignment:
        _require_teacher(user, "view assignments")
        doc = await repo.find_for_teacher_one(assignment_id, user.user_id)
        if not doc:
            raise NotFoundError("Assignment not found")
        return doc

    @staticmethod
    async def update_assignment(
        assignment_id: str,
        data: AssignmentUpdate,
        user: UserContext,
        repo: AssignmentRepo,
    ) -> Assignment:
        _require_teacher(user, "edit assignments")

        changes = data.changes()
        changes["updatedAt"] = utcnow()
        doc = await repo.update_where_status(assignment_id, user.user_id, "draft", changes)
        if not doc:
            raise NotFoundError("Assignment not found or cannot be edited (must be in draft status)")
        return doc

    @staticmethod
    async def publish_assignment(assignment_id: str, user: UserContext, repo: AssignmentRepo) -> Assignment:
        _require_teacher(user, "publish assignments")

        now = utcnow()
        doc = await repo.update_where_status(
            assignment_id, user.user_id, "draft",
            {"status": "published", "publishedAt": now, "updatedAt": now},
        )
        if not doc:
            raise NotFoundError("Assignment not found or cannot be published (must be in draft status)")
        logger.info("Assignment %s pubblicato", assignment_id)
        return doc

    @staticmethod
    async def complete_assignment(assignment_id: str, user: UserContext, repo: AssignmentRepo) -> Assignment:
        _require_teacher(user, "complete assignments")

        now = utcnow()
        doc = await repo.update_where_status(
            assignment_id, user.user_id, "published",
            {"status": "completed", "completedAt": now, "updatedAt": now},
        )
        if not doc:
            raise NotFoundError("Assignment not found or cannot be completed (must be in published status)")
        logger.info("Assignment %s completato", assignment_id)
        return doc

    @staticmethod
    async def delete_assignment(assignment_id: str, user: UserContext, repo: AssignmentRepo) -> None:
        _require_teacher(user, "delete assignments")
        deleted = await repo.delete_where_status(assignment_id, user.user_id, "draft")
        if not deleted:
            raise NotFoundError("Assignment not found or cannot be deleted (must be in draft status)")
        logger.info("Assignment %s cancellato", assignment_id)

    @staticmethod
    async def list_submissions(
        assignment_id: str,
        user: UserContext,
        repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
    ) -> AssignmentSubmissions:
        _require_teacher(user, "view submissions")
        assignment = await repo.find_for_teacher_one(assignment_id, user.user_id)
        if not assignment:
            raise NotFoundError("Assignment not found")

        submissions = await submission_repo.find_for_assignment(assignment.assignmentId)
        return AssignmentSubmissions(
            assignment=projections.assignment_summary(assignment),
            submissions=[projections.submission_view(s, assignment) for s in submissions],
        )

    @staticmethod
    async def review_submission(
        assignment_id: str,
        submission_id: str,
        user: UserContext,
        repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
    ) -> SubmissionView:
        """Segna una submission come revisionata.

        Non c'è guardia contro la doppia review: una seconda chiamata
        aggiorna soltanto reviewedAt.
        """
        _require_teacher(user, "review submissions")
        assignment = await repo.find_for_teacher_one(assignment_id, user.user_id)
        if not assignment:
            raise NotFoundError("Assignment not found")

        submission = await submission_repo.mark_reviewed(assignment.assignmentId, submission_id, utcnow())
        if not submission:
            raise NotFoundError("Submission not found")
        logger.info("Submission %s revisionata da %s", submission_id, user.user_id)
        return projections.submission_view(submission, assignment)
