from typing import Annotated

from fastapi import Depends, Request
from app.database.assignment_repo import AssignmentRepo
from app.database.submission_repo import SubmissionRepo
from app.schemas.context import UserContext
from app.services.auth_service import AuthService


def get_repository(request: Request) -> AssignmentRepo:
    repo = getattr(request.app.state, "assignment_repo", None)
    if repo is None:
        raise RuntimeError("Repository non inizializzato")
    return repo


def get_submission_repository(request: Request) -> SubmissionRepo:
    repo = getattr(request.app.state, "submission_repo", None)
    if repo is None:
        raise RuntimeError("Submission repository non inizializzato")
    return repo


RepoDep = Annotated[AssignmentRepo, Depends(get_repository)]
SubmissionRepoDep = Annotated[SubmissionRepo, Depends(get_submission_repository)]
TeacherDep = Annotated[UserContext, Depends(AuthService.require_role("teacher"))]
StudentDep = Annotated[UserContext, Depends(AuthService.require_role("student"))]
