# app/database/mongo_submission.py
from datetime import datetime
from typing import Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.errors import DuplicateSubmissionError
from app.database.submission_repo import SubmissionRepo
from app.schemas.submission import Submission


class MongoSubmissionRepository(SubmissionRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["submissions"]

    def _from_doc(self, d: dict) -> Submission:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Submission(**base)

    async def create(self, submission: Submission) -> str:
        # l'unicità (assignmentId, studentId) la garantisce l'indice, non un check-then-insert
        try:
            await self.col.insert_one(submission.model_dump())
        except DuplicateKeyError as e:
            raise DuplicateSubmissionError("You have already submitted this assignment") from e
        return submission.submissionId

    async def find_for_assignment(self, assignment_id: str) -> Sequence[Submission]:
        cursor = self.col.find({"assignmentId": str(assignment_id)}).sort("submittedAt", DESCENDING)
        return [self._from_doc(d) async for d in cursor]

    async def find_for_student(self, student_id: str) -> Sequence[Submission]:
        cursor = self.col.find({"studentId": str(student_id)}).sort("submittedAt", DESCENDING)
        return [self._from_doc(d) async for d in cursor]

    async def delete(self, submission_id: str) -> bool:
        res = await self.col.delete_one({"submissionId": str(submission_id)})
        return res.deleted_count > 0

    async def mark_reviewed(self, assignment_id: str, submission_id: str, ts: datetime) -> Optional[Submission]:
        d = await self.col.find_one_and_update(
            {"submissionId": str(submission_id), "assignmentId": str(assignment_id)},
            {"$set": {"reviewed": True, "reviewedAt": ts, "updatedAt": ts}},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def ensure_indexes(self):
        await self.col.create_index("submissionId", unique=True)
        await self.col.create_index(
            [("assignmentId", ASCENDING), ("studentId", ASCENDING)], unique=True
        )
        await self.col.create_index([("studentId", ASCENDING), ("submittedAt", DESCENDING)])
