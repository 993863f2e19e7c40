"""Collects the branch failures of one copy run."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import List, Optional

from ..models.error_record import ErrorLevel, ProcessError


@dataclass
class ErrorHandler:
    errors: List[ProcessError] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def add(self, error: ProcessError) -> None:
        with self._lock:
            self.errors.append(error)

    def add_fatal(self, code: str, message: str, resource_id: Optional[str] = None) -> None:
        self.add(ProcessError(code=code, level=ErrorLevel.FATAL, message=message, resource_id=resource_id))

    def snapshot(self) -> List[ProcessError]:
        with self._lock:
            return list(self.errors)
