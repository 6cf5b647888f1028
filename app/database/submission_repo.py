from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence
from app.schemas.submission import Submission


class SubmissionRepo(ABC):
    @abstractmethod
    async def create(self, submission: Submission) -> str:
        """Inserisce la submission. Solleva DuplicateSubmissionError se la coppia
        (assignmentId, studentId) esiste già."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_assignment(self, assignment_id: str) -> Sequence[Submission]:
        """Submission di un assignment, submittedAt decrescente."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_student(self, student_id: str) -> Sequence[Submission]:
        """Submission di uno studente, submittedAt decrescente."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, submission_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def mark_reviewed(self, assignment_id: str, submission_id: str, ts: datetime) -> Optional[Submission]:
        raise NotImplementedError
