import logging
import uuid
from typing import Sequence

from app.core.errors import NotFoundError
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.schemas.assignment import Assignment, UserRef
from app.schemas.context import UserContext
from app.schemas.submission import Submission, SubmissionCreate, SubmissionView
from app.services import projections
from app.services.assignment_service import _is_student, utcnow

logger = logging.getLogger("assignment.student")


def create_submission_id() -> str:
    return f"sub-{uuid.uuid4().hex}"


def _require_student(user: UserContext, action: str):
    if not _is_student(user.role):
        raise PermissionError(f"Only students can {action}")


class StudentService:

    @staticmethod
    async def list_published(user: UserContext, repo: AssignmentRepo) -> Sequence[Assignment]:
        _require_student(user, "browse published assignments")
        return await repo.find_published()

    @staticmethod
    async def submit(
        assignment_id: str,
        data: SubmissionCreate,
        user: UserContext,
        repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
    ) -> SubmissionView:
        """Consegna la risposta di uno studente.

        Solleva NotFoundError se l'assignment non esiste o non è pubblicato,
        DuplicateSubmissionError (dal repository) se lo studente ha già consegnato.
        """
        _require_student(user, "submit assignments")

        assignment = await repo.find_one(assignment_id, status="published")
        if not assignment:
            raise NotFoundError("Assignment not found or not available for submission")

        now = utcnow()
        submission = Submission(
            submissionId=create_submission_id(),
            assignmentId=assignment.assignmentId,
            studentId=str(user.user_id),
            student=UserRef(id=str(user.user_id), name=user.name, email=user.email),
            answer=data.answer,
            submittedAt=now,
            reviewed=False,
            reviewedAt=None,
            createdAt=now,
            updatedAt=now,
        )
        await submission_repo.create(submission)

        try:
            pushed = await repo.push_submission(assignment.assignmentId, submission.submissionId)
        except Exception:
            # la submission è già salvata: l'array denormalizzato resta indietro
            logger.warning("Push della submission %s su %s fallito",
                           submission.submissionId, assignment.assignmentId, exc_info=True)
            pushed = True
        if not pushed:
            # assignment completato tra il controllo e l'insert
            await submission_repo.delete(submission.submissionId)
            raise NotFoundError("Assignment not found or not available for submission")

        logger.info("Submission %s per assignment %s da %s",
                    submission.submissionId, assignment.assignmentId, user.user_id)
        return projections.submission_view(submission, assignment)

    @staticmethod
    async def list_my_submissions(
        user: UserContext,
        repo: AssignmentRepo,
        submission_repo: SubmissionRepo,
    ) -> list[SubmissionView]:
        _require_student(user, "view their submissions")
        submissions = await submission_repo.find_for_student(user.user_id)
        # una sola query per tutti gli assignment referenziati
        assignments = await repo.find_many(s.assignmentId for s in submissions)
        by_id = {a.assignmentId: a for a in assignments}
        return projections.submission_views(submissions, by_id)
