# test/pytest/test_student.py
import asyncio
import pytest
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from app.core.errors import DuplicateSubmissionError, NotFoundError
from app.schemas.assignment import AssignmentCreate
from app.schemas.submission import SubmissionCreate
from app.services.assignment_service import AssignmentService
from app.services.student_service import StudentService


def _make_create(title="HW", days=7):
    return AssignmentCreate(
        title=title,
        description="desc",
        dueDate=datetime.now(timezone.utc) + timedelta(days=days),
    )


async def _create(repo, teacher, publish=True, **kw):
    a = await AssignmentService.create_assignment(_make_create(**kw), teacher, repo)
    if publish:
        a = await AssignmentService.publish_assignment(a.assignmentId, teacher, repo)
    return a


@pytest.mark.asyncio
async def test_list_published_across_teachers_by_due_date(repo, teacher, other_teacher, student):
    await _create(repo, teacher, title="Late", days=10)
    await _create(repo, other_teacher, title="Soon", days=1)
    await _create(repo, teacher, publish=False, title="Draft", days=2)
    done = await _create(repo, teacher, title="Done", days=3)
    await AssignmentService.complete_assignment(done.assignmentId, teacher, repo)

    items = await StudentService.list_published(student, repo)
    assert [a.title for a in items] == ["Soon", "Late"]
    assert items[0].teacher.name == "Bruno"
    assert items[0].teacher.email == "bruno@school.test"

@pytest.mark.asyncio
async def test_student_operations_require_student(repo, submission_repo, teacher):
    with pytest.raises(PermissionError):
        await StudentService.list_published(teacher, repo)
    with pytest.raises(PermissionError):
        await StudentService.submit("as-1", SubmissionCreate(answer="x"), teacher, repo, submission_repo)
    with pytest.raises(PermissionError):
        await StudentService.list_my_submissions(teacher, repo, submission_repo)

def test_answer_must_not_be_blank():
    with pytest.raises(ValidationError):
        SubmissionCreate(answer="   ")
    assert SubmissionCreate(answer="  x ").answer == "x"

@pytest.mark.asyncio
async def test_submit_ok(repo, submission_repo, teacher, student):
    a = await _create(repo, teacher, title="HW1")
    view = await StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)

    assert view.assignmentId == a.assignmentId
    assert view.assignmentTitle == "HW1"
    assert view.studentId == "s1"
    assert view.studentName == "Carla"
    assert view.answer == "x"
    assert view.reviewed is False
    assert view.reviewedAt is None

    saved = await repo.find_one(a.assignmentId)
    assert saved.submissions == [view.submissionId]

@pytest.mark.asyncio
async def test_submit_requires_published(repo, submission_repo, teacher, student):
    draft = await _create(repo, teacher, publish=False)
    with pytest.raises(NotFoundError):
        await StudentService.submit(draft.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)

    done = await _create(repo, teacher)
    await AssignmentService.complete_assignment(done.assignmentId, teacher, repo)
    with pytest.raises(NotFoundError):
        await StudentService.submit(done.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)

    with pytest.raises(NotFoundError):
        await StudentService.submit("as-missing", SubmissionCreate(answer="x"), student, repo, submission_repo)
    assert submission_repo.items == {}

@pytest.mark.asyncio
async def test_second_submit_is_conflict(repo, submission_repo, teacher, student, student2):
    a = await _create(repo, teacher)
    await StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)
    with pytest.raises(DuplicateSubmissionError):
        await StudentService.submit(a.assignmentId, SubmissionCreate(answer="again"), student, repo, submission_repo)

    await StudentService.submit(a.assignmentId, SubmissionCreate(answer="y"), student2, repo, submission_repo)
    assert len(submission_repo.items) == 2
    assert len((await repo.find_one(a.assignmentId)).submissions) == 2

@pytest.mark.asyncio
async def test_list_my_submissions(repo, submission_repo, teacher, student, student2):
    a = await _create(repo, teacher, title="A")
    b = await _create(repo, teacher, title="B")
    await StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)
    await StudentService.submit(b.assignmentId, SubmissionCreate(answer="y"), student, repo, submission_repo)
    await StudentService.submit(a.assignmentId, SubmissionCreate(answer="z"), student2, repo, submission_repo)

    mine = await StudentService.list_my_submissions(student, repo, submission_repo)
    assert [s.assignmentTitle for s in mine] == ["B", "A"]
    assert {s.studentId for s in mine} == {"s1"}

@pytest.mark.asyncio
async def test_full_workflow(repo, submission_repo, teacher, student, student2):
    data = AssignmentCreate(title="HW1", description="desc", dueDate="2025-01-01")
    a = await AssignmentService.create_assignment(data, teacher, repo)
    assert a.status == "draft"

    a = await AssignmentService.publish_assignment(a.assignmentId, teacher, repo)
    assert a.status == "published"
    assert a.publishedAt is not None

    sub_a = await StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)
    with pytest.raises(DuplicateSubmissionError):
        await StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)
    await StudentService.submit(a.assignmentId, SubmissionCreate(answer="y"), student2, repo, submission_repo)

    reviewed = await AssignmentService.review_submission(
        a.assignmentId, sub_a.submissionId, teacher, repo, submission_repo
    )
    assert reviewed.reviewed is True
    assert reviewed.reviewedAt is not None

    a = await AssignmentService.complete_assignment(a.assignmentId, teacher, repo)
    assert a.status == "completed"
    with pytest.raises(NotFoundError):
        await AssignmentService.delete_assignment(a.assignmentId, teacher, repo)


@pytest.mark.asyncio
async def test_published_list_mixes_bare_and_zoned_due_dates(repo, teacher, student):
    for title, due in (("Feb", "2025-02-01T00:00:00Z"), ("Jan", "2025-01-01")):
        data = AssignmentCreate(title=title, description="desc", dueDate=due)
        a = await AssignmentService.create_assignment(data, teacher, repo)
        await AssignmentService.publish_assignment(a.assignmentId, teacher, repo)

    items = await StudentService.list_published(student, repo)
    assert [a.title for a in items] == ["Jan", "Feb"]
    assert all(a.dueDate.utcoffset() == timedelta(0) for a in items)

@pytest.mark.asyncio
async def test_concurrent_submits_only_one_wins(repo, submission_repo, teacher, student):
    a = await _create(repo, teacher)

    results = await asyncio.gather(
        StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo),
        StudentService.submit(a.assignmentId, SubmissionCreate(answer="y"), student, repo, submission_repo),
        return_exceptions=True,
    )
    assert sum(isinstance(r, DuplicateSubmissionError) for r in results) == 1
    assert sum(not isinstance(r, Exception) for r in results) == 1
    assert len(submission_repo.items) == 1
    assert len((await repo.find_one(a.assignmentId)).submissions) == 1

@pytest.mark.asyncio
async def test_submit_survives_failed_push(repo, submission_repo, teacher, student, caplog):
    a = await _create(repo, teacher)

    async def broken_push(*args, **kwargs):
        raise RuntimeError("db hiccup")
    repo.push_submission = broken_push

    view = await StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)
    assert view.submissionId in submission_repo.items
    assert "fallito" in caplog.text

@pytest.mark.asyncio
async def test_submit_rolled_back_when_completed_meanwhile(repo, submission_repo, teacher, student):
    a = await _create(repo, teacher)
    stale = await repo.find_one(a.assignmentId)
    await AssignmentService.complete_assignment(a.assignmentId, teacher, repo)

    # lettura "vecchia": il check vede ancora published
    async def stale_find_one(assignment_id, status=None):
        return stale
    repo.find_one = stale_find_one

    with pytest.raises(NotFoundError):
        await StudentService.submit(a.assignmentId, SubmissionCreate(answer="x"), student, repo, submission_repo)
    assert submission_repo.items == {}
