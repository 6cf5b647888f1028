from pydantic import BaseModel, field_validator
from typing import List, Literal, Optional
from datetime import datetime, timezone

AssignmentStatus = Literal["draft", "published", "completed"]
ASSIGNMENT_STATUSES = ("draft", "published", "completed")


def _required_text(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{field} cannot be empty")
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # una data senza fuso (es. "2025-01-01") viene interpretata come UTC
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserRef(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class AssignmentCreate(BaseModel):
    title: str
    description: str
    dueDate: datetime

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, v: str, info):
        return _required_text(v, info.field_name.capitalize())

    @field_validator("dueDate")
    @classmethod
    def _due_date_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class AssignmentUpdate(BaseModel):
    # update parziale: i campi omessi mantengono il valore precedente.
    # title/description null valgono come vuoti; dueDate null viene ignorato
    title: Optional[str] = None
    description: Optional[str] = None
    dueDate: Optional[datetime] = None

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, v: Optional[str], info):
        # gira solo sui campi presenti nel body, mai sui default
        return _required_text(v, info.field_name.capitalize())

    @field_validator("dueDate")
    @classmethod
    def _due_date_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class Assignment(AssignmentCreate):
    assignmentId: str
    teacherId: str
    teacher: UserRef
    status: AssignmentStatus = "draft"
    submissions: List[str] = []
    createdAt: datetime
    updatedAt: datetime
    publishedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None


class AssignmentPage(BaseModel):
    assignments: List[Assignment]
    totalPages: int
    currentPage: int
    total: int


class AssignmentSummary(BaseModel):
    assignmentId: str
    title: str
    description: str
    status: AssignmentStatus
