from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence, Tuple
from app.schemas.assignment import Assignment


class AssignmentRepo(ABC):
    @abstractmethod
    async def create(self, assignment: Assignment) -> str:
        """Inserisce un assignment (id già generato dal service) e ritorna l'ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_page_for_teacher(
        self,
        teacher_id: str,
        status: Optional[str],
        skip: int,
        limit: int,
    ) -> Tuple[Sequence[Assignment], int]:
        """Pagina degli assignment di un teacher (createdAt desc) più il totale."""
        raise NotImplementedError

    @abstractmethod
    async def find_for_teacher_one(self, assignment_id: str, teacher_id: str) -> Optional[Assignment]:
        """Ritorna l'assignment solo se appartiene al teacher, altrimenti None."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: str, status: Optional[str] = None) -> Optional[Assignment]:
        raise NotImplementedError

    @abstractmethod
    async def find_many(self, assignment_ids: Iterable[str]) -> Sequence[Assignment]:
        raise NotImplementedError

    @abstractmethod
    async def find_published(self) -> Sequence[Assignment]:
        """Tutti gli assignment pubblicati, ordinati per dueDate crescente."""
        raise NotImplementedError

    @abstractmethod
    async def update_where_status(
        self,
        assignment_id: str,
        teacher_id: str,
        expected_status: str,
        changes: dict,
    ) -> Optional[Assignment]:
        """Aggiornamento condizionale: applica `changes` solo se lo stato salvato
        è ancora `expected_status`. Ritorna il documento aggiornato o None."""
        raise NotImplementedError

    @abstractmethod
    async def delete_where_status(self, assignment_id: str, teacher_id: str, expected_status: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def push_submission(self, assignment_id: str, submission_id: str) -> bool:
        """Aggiunge l'id della submission all'assignment, solo se ancora pubblicato.
        Ritorna False se l'assignment non è (più) in stato published."""
        raise NotImplementedError
