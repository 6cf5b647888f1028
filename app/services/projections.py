"""Proiezioni esplicite record -> risposta.

Tutti i dati "denormalizzati" (nome studente, titolo assignment) vengono
copiati qui a partire da oggetti già caricati: nessuna query nascosta.
"""
from typing import Mapping, Optional

from app.schemas.assignment import Assignment, AssignmentSummary
from app.schemas.submission import Submission, SubmissionView


def assignment_summary(a: Assignment) -> AssignmentSummary:
    return AssignmentSummary(
        assignmentId=a.assignmentId,
        title=a.title,
        description=a.description,
        status=a.status,
    )


def submission_view(s: Submission, assignment: Optional[Assignment] = None) -> SubmissionView:
    return SubmissionView(
        submissionId=s.submissionId,
        assignmentId=s.assignmentId,
        assignmentTitle=assignment.title if assignment else None,
        studentId=s.student.id,
        studentName=s.student.name,
        answer=s.answer,
        submittedDate=s.submittedAt,
        reviewed=s.reviewed,
        reviewedAt=s.reviewedAt,
    )


def submission_views(submissions, assignments: Mapping[str, Assignment]) -> list[SubmissionView]:
    return [submission_view(s, assignments.get(s.assignmentId)) for s in submissions]
