# test/pytest/conftest.py
import itertools

import pytest

from app.core.errors import DuplicateSubmissionError
from app.schemas.assignment import Assignment
from app.schemas.context import UserContext
from app.schemas.submission import Submission


# ------------------------- Fake repositories -------------------------
class FakeAssignmentRepo:
    """Stessa semantica del repository Mongo, tutto in memoria."""

    def __init__(self):
        self.items: dict[str, Assignment] = {}
        self._seq: dict[str, int] = {}
        self._counter = itertools.count()

    def _order_key(self, a: Assignment):
        return (a.createdAt, self._seq[a.assignmentId])

    async def create(self, assignment: Assignment) -> str:
        # NON genera ID: si aspetta assignment.assignmentId già valorizzato
        if not getattr(assignment, "assignmentId", None):
            raise ValueError("assignmentId must be set by the service")
        self.items[assignment.assignmentId] = assignment.model_copy(deep=True)
        self._seq[assignment.assignmentId] = next(self._counter)
        return assignment.assignmentId

    async def find_page_for_teacher(self, teacher_id, status, skip, limit):
        found = [
            a for a in self.items.values()
            if a.teacherId == teacher_id and (status is None or a.status == status)
        ]
        found.sort(key=self._order_key, reverse=True)
        return [a.model_copy(deep=True) for a in found[skip:skip + limit]], len(found)

    async def find_for_teacher_one(self, assignment_id, teacher_id):
        a = self.items.get(assignment_id)
        if a is None or a.teacherId != teacher_id:
            return None
        return a.model_copy(deep=True)

    async def find_one(self, assignment_id, status=None):
        a = self.items.get(assignment_id)
        if a is None or (status is not None and a.status != status):
            return None
        return a.model_copy(deep=True)

    async def find_many(self, assignment_ids):
        ids = set(assignment_ids)
        return [a.model_copy(deep=True) for k, a in self.items.items() if k in ids]

    async def find_published(self):
        found = [a for a in self.items.values() if a.status == "published"]
        found.sort(key=lambda a: a.dueDate)
        return [a.model_copy(deep=True) for a in found]

    async def update_where_status(self, assignment_id, teacher_id, expected_status, changes):
        a = self.items.get(assignment_id)
        if a is None or a.teacherId != teacher_id or a.status != expected_status:
            return None
        updated = a.model_copy(update=changes, deep=True)
        self.items[assignment_id] = updated
        return updated.model_copy(deep=True)

    async def delete_where_status(self, assignment_id, teacher_id, expected_status):
        a = self.items.get(assignment_id)
        if a is None or a.teacherId != teacher_id or a.status != expected_status:
            return False
        del self.items[assignment_id]
        return True

    async def push_submission(self, assignment_id, submission_id):
        a = self.items.get(assignment_id)
        if a is None or a.status != "published":
            return False
        a.submissions.append(submission_id)
        return True


class FakeSubmissionRepo:
    def __init__(self):
        self.items: dict[str, Submission] = {}
        self._seq: dict[str, int] = {}
        self._counter = itertools.count()

    def _sorted_desc(self, subs):
        return sorted(subs, key=lambda s: (s.submittedAt, self._seq[s.submissionId]), reverse=True)

    async def create(self, submission: Submission) -> str:
        # come l'indice unico (assignmentId, studentId) su Mongo
        for s in self.items.values():
            if s.assignmentId == submission.assignmentId and s.studentId == submission.studentId:
                raise DuplicateSubmissionError("You have already submitted this assignment")
        self.items[submission.submissionId] = submission.model_copy(deep=True)
        self._seq[submission.submissionId] = next(self._counter)
        return submission.submissionId

    async def find_for_assignment(self, assignment_id):
        found = [s for s in self.items.values() if s.assignmentId == assignment_id]
        return [s.model_copy(deep=True) for s in self._sorted_desc(found)]

    async def find_for_student(self, student_id):
        found = [s for s in self.items.values() if s.studentId == student_id]
        return [s.model_copy(deep=True) for s in self._sorted_desc(found)]

    async def delete(self, submission_id):
        self._seq.pop(submission_id, None)
        return self.items.pop(submission_id, None) is not None

    async def mark_reviewed(self, assignment_id, submission_id, ts):
        s = self.items.get(submission_id)
        if s is None or s.assignmentId != assignment_id:
            return None
        s.reviewed = True
        s.reviewedAt = ts
        s.updatedAt = ts
        return s.model_copy(deep=True)


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def repo():
    return FakeAssignmentRepo()

@pytest.fixture
def submission_repo():
    return FakeSubmissionRepo()

@pytest.fixture
def teacher():
    return UserContext(user_id="t1", role="teacher", name="Ada", email="ada@school.test")

@pytest.fixture
def other_teacher():
    return UserContext(user_id="t2", role="teacher", name="Bruno", email="bruno@school.test")

@pytest.fixture
def student():
    return UserContext(user_id="s1", role="student", name="Carla", email="carla@school.test")

@pytest.fixture
def student2():
    return UserContext(user_id="s2", role="student", name="Dario", email="dario@school.test")
