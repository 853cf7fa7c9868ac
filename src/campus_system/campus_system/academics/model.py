from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_CREDIT_HOURS


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    name: str
    email: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class Subject:
    subject_id: str
    name: str
    code: str
    credit_hours: int = DEFAULT_CREDIT_HOURS
    teacher_id: Optional[str] = None


@dataclass(frozen=True)
class Semester:
    semester_id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
