from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..sessions.model import CompletedSession
from .model import HistoryEntry


class HistoryRepository(Protocol):
    def save(self, session: CompletedSession, *, created_at: datetime) -> HistoryEntry:
        raise NotImplementedError

    def find(
        self,
        teacher_id: int,
        *,
        subject: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: int,
        offset: int = 0,
    ) -> tuple[Sequence[HistoryEntry], int]:
        """Newest-first slice plus the total count matching the same filter."""

        raise NotImplementedError

    def rates_since(self, teacher_id: int, since: datetime) -> Sequence[int]:
        raise NotImplementedError

    def purge_older_than(self, cutoff: datetime) -> int:
        raise NotImplementedError
