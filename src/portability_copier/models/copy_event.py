"""Progress events emitted while a job is copied."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class CopyEventType(str, Enum):
    JOB_START = "JOB_START"
    BRANCH_START = "BRANCH_START"
    EXPORT_RETRY = "EXPORT_RETRY"
    PAGE_IMPORTED = "PAGE_IMPORTED"
    BRANCH_FAILED = "BRANCH_FAILED"
    JOB_END = "JOB_END"


@dataclass
class CopyEvent:
    event_type: CopyEventType
    job_id: str
    timestamp: datetime = field(default_factory=datetime.now)
    resource_id: Optional[str] = None
    token: Optional[str] = None
    attempt: Optional[int] = None
    depth: Optional[int] = None
    status: Optional[str] = None
    message: Optional[str] = None
