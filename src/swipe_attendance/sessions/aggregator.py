"""Reduce a finished decision sequence into session aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from ..core.enums import AttendanceStatus

if TYPE_CHECKING:
    from .model import Decision


@dataclass(frozen=True)
class AttendanceSummary:
    total: int
    present: int
    absent: int
    rate: int


def round_half_up(numerator: int, denominator: int) -> int:
    """Round numerator/denominator to the nearest integer, halves going up.

    Integer arithmetic only; Python's round() would send 2.5 to 2.
    """

    if denominator <= 0:
        return 0
    return (2 * numerator + denominator) // (2 * denominator)


def summarize(decisions: Sequence["Decision"], roster_size: int) -> AttendanceSummary:
    present = sum(1 for d in decisions if d.status == AttendanceStatus.PRESENT)
    absent = sum(1 for d in decisions if d.status == AttendanceStatus.ABSENT)
    total = int(roster_size)
    return AttendanceSummary(
        total=total,
        present=present,
        absent=absent,
        rate=round_half_up(present * 100, total) if total > 0 else 0,
    )
