from typing import Optional
from fastapi import APIRouter, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.deps import RepoDep, SubmissionRepoDep, TeacherDep
from app.core.errors import NotFoundError
from app.schemas.assignment import Assignment, AssignmentCreate, AssignmentPage, AssignmentUpdate
from app.schemas.submission import AssignmentSubmissions
from app.services.assignment_service import AssignmentService


router = APIRouter()


@router.post("/assignments", status_code=status.HTTP_201_CREATED, response_model=Assignment)
async def create_assignment_endpoint(
    assignment: AssignmentCreate,
    user: TeacherDep,
    repo: RepoDep,
):
    created = await AssignmentService.create_assignment(assignment, user, repo)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder(created),
        headers={"Location": f"/assignments/{created.assignmentId}"},
    )


@router.get("/assignments", response_model=AssignmentPage)
async def list_assignments_endpoint(
    user: TeacherDep,
    repo: RepoDep,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = settings.default_page_limit,
):
    return await AssignmentService.list_assignments(user, repo, status=status, page=page, limit=limit)


@router.get("/assignments/{assignment_id}", response_model=Assignment)
async def get_assignment_endpoint(
    assignment_id: str,
    user: TeacherDep,
    repo: RepoDep,
):
    try:
        return await AssignmentService.get_assignment(assignment_id, user, repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/assignments/{assignment_id}", response_model=Assignment)
async def update_assignment_endpoint(
    assignment_id: str,
    data: AssignmentUpdate,
    user: TeacherDep,
    repo: RepoDep,
):
    try:
        return await AssignmentService.update_assignment(assignment_id, data, user, repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/assignments/{assignment_id}/publish", response_model=Assignment)
async def publish_assignment_endpoint(
    assignment_id: str,
    user: TeacherDep,
    repo: RepoDep,
):
    try:
        return await AssignmentService.publish_assignment(assignment_id, user, repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/assignments/{assignment_id}/complete", response_model=Assignment)
async def complete_assignment_endpoint(
    assignment_id: str,
    user: TeacherDep,
    repo: RepoDep,
):
    try:
        return await AssignmentService.complete_assignment(assignment_id, user, repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/assignments/{assignment_id}")
async def delete_assignment_endpoint(
    assignment_id: str,
    user: TeacherDep,
    repo: RepoDep,
):
    try:
        await AssignmentService.delete_assignment(assignment_id, user, repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Assignment deleted successfully"}


@router.get("/assignments/{assignment_id}/submissions", response_model=AssignmentSubmissions)
async def list_submissions_endpoint(
    assignment_id: str,
    user: TeacherDep,
    repo: RepoDep,
    submission_repo: SubmissionRepoDep,
):
    try:
        return await AssignmentService.list_submissions(assignment_id, user, repo, submission_repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/assignments/{assignment_id}/submissions/{submission_id}/review")
async def review_submission_endpoint(
    assignment_id: str,
    submission_id: str,
    user: TeacherDep,
    repo: RepoDep,
    submission_repo: SubmissionRepoDep,
):
    try:
        submission = await AssignmentService.review_submission(
            assignment_id, submission_id, user, repo, submission_repo
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "success": True,
        "message": "Submission marked as reviewed",
        "submission": submission,
    }
