# app/database/mongo_assignment.py
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from app.database.assignment_repo import AssignmentRepo
from app.schemas.assignment import Assignment

logger = logging.getLogger("assignment.repo")


class MongoAssignmentRepository(AssignmentRepo):
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db["assignments"]

    def _from_doc(self, d: dict) -> Assignment:
        base = {k: v for k, v in d.items() if k not in {"_id"}}
        return Assignment(**base)

    async def create(self, assignment: Assignment) -> str:
        await self.col.insert_one(assignment.model_dump())
        return assignment.assignmentId

    async def find_page_for_teacher(
        self,
        teacher_id: str,
        status: Optional[str],
        skip: int,
        limit: int,
    ) -> Tuple[Sequence[Assignment], int]:
        filt = {"teacherId": str(teacher_id)}
        if status:
            filt["status"] = status
        # _id come tie-breaker: createdAt è troncato al millisecondo
        cursor = (
            self.col.find(filt)
            .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            .skip(skip)
            .limit(limit)
        )
        docs: List[dict] = [d async for d in cursor]
        total = await self.col.count_documents(filt)
        return [self._from_doc(d) for d in docs], total

    async def find_for_teacher_one(self, assignment_id: str, teacher_id: str) -> Optional[Assignment]:
        d = await self.col.find_one({"assignmentId": str(assignment_id), "teacherId": str(teacher_id)})
        return self._from_doc(d) if d else None

    async def find_one(self, assignment_id: str, status: Optional[str] = None) -> Optional[Assignment]:
        filt = {"assignmentId": str(assignment_id)}
        if status:
            filt["status"] = status
        d = await self.col.find_one(filt)
        return self._from_doc(d) if d else None

    async def find_many(self, assignment_ids: Iterable[str]) -> Sequence[Assignment]:
        ids = list({str(i) for i in assignment_ids})
        if not ids:
            return []
        cursor = self.col.find({"assignmentId": {"$in": ids}})
        return [self._from_doc(d) async for d in cursor]

    async def find_published(self) -> Sequence[Assignment]:
        cursor = self.col.find({"status": "published"}).sort("dueDate", ASCENDING)
        return [self._from_doc(d) async for d in cursor]

    async def update_where_status(
        self,
        assignment_id: str,
        teacher_id: str,
        expected_status: str,
        changes: dict,
    ) -> Optional[Assignment]:
        # il filtro sullo stato rende la transizione atomica (niente doppio publish)
        d = await self.col.find_one_and_update(
            {
                "assignmentId": str(assignment_id),
                "teacherId": str(teacher_id),
                "status": expected_status,
            },
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_doc(d) if d else None

    async def delete_where_status(self, assignment_id: str, teacher_id: str, expected_status: str) -> bool:
        res = await self.col.delete_one({
            "assignmentId": str(assignment_id),
            "teacherId": str(teacher_id),
            "status": expected_status,
        })
        return res.deleted_count > 0

    async def push_submission(self, assignment_id: str, submission_id: str) -> bool:
        # lo status nel filtro chiude la finestra tra il controllo e l'insert
        res = await self.col.update_one(
            {"assignmentId": str(assignment_id), "status": "published"},
            {"$push": {"submissions": str(submission_id)}},
        )
        if res.matched_count == 0:
            logger.warning("push_submission: assignment %s non trovato o non più pubblicato", assignment_id)
        return res.matched_count > 0

    async def ensure_indexes(self):
        await self.col.create_index("assignmentId", unique=True)
        await self.col.create_index([("teacherId", ASCENDING), ("status", ASCENDING)])
        await self.col.create_index([("createdAt", DESCENDING)])
        await self.col.create_index([("status", ASCENDING), ("dueDate", ASCENDING)])
