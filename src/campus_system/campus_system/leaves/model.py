from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveApplication:
    leave_id: str
    student_id: str
    start_date: date
    end_date: date
    days: int
    reason: str
    leave_type: LeaveType
    status: LeaveStatus
    created_at: datetime
    attachments: Tuple[str, ...] = ()
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None


@dataclass(frozen=True)
class LeaveHistory:
    student_id: str
    applications: List[LeaveApplication]
    total: int
    approved: int
    rejected: int
    pending: int
    total_days_approved: int


@dataclass(frozen=True)
class LeaveStats:
    total: int
    pending: int
    approved: int
    rejected: int
    approved_by_type: Dict[str, int] = field(default_factory=dict)
    monthly: Dict[str, Dict[str, int]] = field(default_factory=dict)
