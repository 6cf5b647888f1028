from fastapi import APIRouter, HTTPException, status

from app.core.deps import RepoDep, StudentDep, SubmissionRepoDep
from app.core.errors import DuplicateSubmissionError, NotFoundError
from app.schemas.submission import SubmissionCreate
from app.services.student_service import StudentService


router = APIRouter(prefix="/student")


@router.get("/assignments")
async def list_published_endpoint(user: StudentDep, repo: RepoDep):
    assignments = await StudentService.list_published(user, repo)
    return {"success": True, "assignments": assignments}


@router.post("/assignments/{assignment_id}/submit", status_code=status.HTTP_201_CREATED)
async def submit_assignment_endpoint(
    assignment_id: str,
    data: SubmissionCreate,
    user: StudentDep,
    repo: RepoDep,
    submission_repo: SubmissionRepoDep,
):
    try:
        submission = await StudentService.submit(assignment_id, data, user, repo, submission_repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateSubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "success": True,
        "message": "Assignment submitted successfully",
        "submission": submission,
    }


@router.get("/submissions")
async def list_my_submissions_endpoint(
    user: StudentDep,
    repo: RepoDep,
    submission_repo: SubmissionRepoDep,
):
    submissions = await StudentService.list_my_submissions(user, repo, submission_repo)
    return {"success": True, "submissions": submissions}
