from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import day_bounds, now_local, retention_cutoff
from ..core.constants import DEFAULT_HISTORY_LIMIT, HISTORY_RETENTION_DAYS, MAX_HISTORY_LIMIT
from ..core.exceptions import DuplicateKeyError, ValidationError
from ..sessions.model import CompletedSession
from .model import HistoryEntry, HistoryPage, Pagination
from .repository import HistoryRepository

logger = logging.getLogger(__name__)


class HistoryService:
    """Persist finalized sessions and page through the retained history.

    Entries older than the retention window are filtered out at query time, so
    they disappear on schedule even if the purge sweep has not run yet.
    """

    def __init__(self, history: HistoryRepository, *, retention_days: int = HISTORY_RETENTION_DAYS):
        self._history = history
        self._retention_days = int(retention_days)

    @property
    def retention_days(self) -> int:
        return self._retention_days

    def visible_since(self, now: datetime) -> datetime:
        return retention_cutoff(now, self._retention_days)

    def save(self, session: CompletedSession, *, now: Optional[datetime] = None) -> HistoryEntry:
        try:
            entry = self._history.save(session, created_at=now or now_local())
        except DuplicateKeyError:
            logger.warning("Attendance walk %s for teacher %s was already saved", session.walk_id, session.teacher_id)
            raise
        logger.info(
            "Saved attendance %s for teacher %s (%s): %d/%d present",
            entry.entry_id,
            entry.teacher_id,
            entry.subject,
            entry.summary.present,
            entry.summary.total,
        )
        return entry

    def query(
        self,
        teacher_id: int,
        *,
        subject: Optional[str] = None,
        date_filter: Optional[date] = None,
        page: int = 1,
        limit: int = DEFAULT_HISTORY_LIMIT,
        now: Optional[datetime] = None,
    ) -> HistoryPage:
        page = int(page)
        limit = int(limit)
        if page < 1:
            raise ValidationError("Page must be 1 or greater")
        if limit < 1 or limit > MAX_HISTORY_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_HISTORY_LIMIT}")

        created_from = self.visible_since(now or now_local())
        created_to = None
        if date_filter is not None:
            day_start, day_end = day_bounds(date_filter)
            created_from = max(created_from, day_start)
            created_to = day_end

        entries, total = self._history.find(
            teacher_id,
            subject=subject or None,
            created_from=created_from,
            created_to=created_to,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return HistoryPage(
            entries=tuple(entries),
            pagination=Pagination(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit)),
        )

    def recent(self, teacher_id: int, *, limit: int, now: Optional[datetime] = None) -> HistoryPage:
        return self.query(teacher_id, page=1, limit=limit, now=now)

    def rates_since(self, teacher_id: int, since: datetime) -> list[int]:
        return list(self._history.rates_since(teacher_id, since))

    def purge_expired(self, *, now: Optional[datetime] = None) -> int:
        cutoff = self.visible_since(now or now_local())
        removed = self._history.purge_older_than(cutoff)
        logger.info("Retention sweep removed %d attendance record(s) older than %s", removed, cutoff)
        return removed
