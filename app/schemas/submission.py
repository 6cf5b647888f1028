from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime

from app.schemas.assignment import AssignmentSummary, UserRef


class SubmissionCreate(BaseModel):
    answer: str

    @field_validator("answer")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Answer is required")
        return v


class Submission(SubmissionCreate):
    submissionId: str
    assignmentId: str
    studentId: str
    student: UserRef
    submittedAt: datetime
    reviewed: bool = False
    reviewedAt: Optional[datetime] = None
    createdAt: datetime
    updatedAt: datetime


class SubmissionView(BaseModel):
    """Submission appiattita per le risposte (dati studente/assignment copiati)."""
    submissionId: str
    assignmentId: str
    assignmentTitle: Optional[str] = None
    studentId: str
    studentName: Optional[str] = None
    answer: str
    submittedDate: datetime
    reviewed: bool
    reviewedAt: Optional[datetime] = None


class AssignmentSubmissions(BaseModel):
    assignment: AssignmentSummary
    submissions: List[SubmissionView]
