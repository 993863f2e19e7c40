"""Outcomes reported by exporters and importers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .continuation import ContinuationRecord


class ResultType(str, Enum):
    CONTINUE = "CONTINUE"
    END = "END"
    ERROR = "ERROR"


class ImportResultType(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ExportOutcome:
    result_type: ResultType
    payload: Any = None
    continuation: Optional[ContinuationRecord] = None
    message: Optional[str] = None

    @classmethod
    def continuing(cls, payload: Any, continuation: ContinuationRecord) -> "ExportOutcome":
        return cls(ResultType.CONTINUE, payload=payload, continuation=continuation)

    @classmethod
    def ended(cls, payload: Any, continuation: Optional[ContinuationRecord] = None) -> "ExportOutcome":
        return cls(ResultType.END, payload=payload, continuation=continuation)

    @classmethod
    def error(cls, message: Optional[str]) -> "ExportOutcome":
        return cls(ResultType.ERROR, message=message)

    @property
    def is_error(self) -> bool:
        return self.result_type == ResultType.ERROR

    def has_continuation(self) -> bool:
        return self.continuation is not None and not self.continuation.is_empty()


@dataclass(frozen=True)
class ImportOutcome:
    result_type: ImportResultType
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "ImportOutcome":
        return cls(ImportResultType.OK)

    @classmethod
    def error(cls, message: Optional[str]) -> "ImportOutcome":
        return cls(ImportResultType.ERROR, message=message)

    @property
    def is_error(self) -> bool:
        return self.result_type == ImportResultType.ERROR
