from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Binary decision recorded for one student in one session."""

    PRESENT = "present"
    ABSENT = "absent"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"
