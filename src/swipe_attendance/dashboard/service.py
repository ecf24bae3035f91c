from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DASHBOARD_RECENT_LIMIT, DASHBOARD_WINDOW_DAYS
from ..history.model import HistoryEntry
from ..history.service import HistoryService
from ..roster.service import RosterService
from ..sessions.aggregator import round_half_up


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    total_records: int
    average_rate: int
    recent: tuple[HistoryEntry, ...]


class DashboardService:
    """Read-only overview: roster size, retained records, weekly average rate."""

    def __init__(self, roster: RosterService, history: HistoryService):
        self._roster = roster
        self._history = history

    def stats(self, teacher_id: int, *, now: Optional[datetime] = None) -> DashboardStats:
        now = now or now_local()
        recent = self._history.recent(teacher_id, limit=DASHBOARD_RECENT_LIMIT, now=now)

        since = max(now - timedelta(days=DASHBOARD_WINDOW_DAYS), self._history.visible_since(now))
        rates = self._history.rates_since(teacher_id, since)

        return DashboardStats(
            total_students=self._roster.count(teacher_id),
            total_records=recent.pagination.total,
            average_rate=round_half_up(sum(rates), len(rates)),
            recent=recent.entries,
        )
