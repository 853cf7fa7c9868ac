from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled student.

    Pure data object; repositories own storage.
    """

    student_id: str
    name: str
    roll_number: str
    email: Optional[str] = None
    phone: Optional[str] = None
    semester: Optional[int] = None
    department: Optional[str] = None
    is_active: bool = True
