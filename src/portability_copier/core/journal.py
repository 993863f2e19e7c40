"""Per-job journal of idempotent import results, used to resume a job."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..utils.logger import get_logger

VALID_STATUS = {"SUCCESS", "FAILED"}


def journal_path_for(journal_dir: Path, job_id: str) -> Path:
    safe_id = "".join(char if char.isalnum() or char in "-_." else "_" for char in job_id)
    return journal_dir / f"{safe_id}.jsonl"


class JournalWriter:
    """Appends result records; writes the JOB header when the file is new."""

    def __init__(self, path: Path, job_id: str, logger=None) -> None:
        self.path = path
        self.job_id = job_id
        self.logger = logger or get_logger(self.__class__.__name__)
        path.parent.mkdir(parents=True, exist_ok=True)
        is_new = not path.exists() or path.stat().st_size == 0
        self._handle = path.open("a", encoding="utf-8")
        if is_new:
            self._write_record(
                {
                    "record_type": "JOB",
                    "job_id": job_id,
                    "created_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                }
            )

    def __enter__(self) -> "JournalWriter":
        return self

    def __exit__(self, exc_type, exc, traceback) -> None:
        self.close()

    def write_success(self, key: str, value: Any, description: Optional[str] = None) -> None:
        self._write_record(
            {
                "record_type": "RESULT",
                "key": key,
                "status": "SUCCESS",
                "value": value,
                "description": description,
            }
        )

    def write_failure(self, key: str, error_message: str, description: Optional[str] = None) -> None:
        self._write_record(
            {
                "record_type": "RESULT",
                "key": key,
                "status": "FAILED",
                "error_message": error_message,
                "description": description,
            }
        )

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    def _write_record(self, payload: dict[str, object]) -> None:
        # json.dumps raises before anything reaches the file.
        line = json.dumps(payload, ensure_ascii=True)
        self._handle.write(line + "\n")
        self._handle.flush()


def read_journal_records(path: Path) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    try:
        with path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                records.append(json.loads(line))
    except OSError as exc:
        logger = get_logger("JournalReader")
        logger.warning(f"Cannot read journal: {path} ({exc})")
    return records


def load_successful_results(path: Path, job_id: str) -> dict[str, Any]:
    """Return key -> cached value for every SUCCESS record of ``job_id``."""
    records = read_journal_records(path)
    if not records:
        return {}

    header = records[0]
    if header.get("record_type") != "JOB":
        raise ValueError(f"Journal has no JOB header: {path}")
    if header.get("job_id") != job_id:
        raise ValueError(
            f"Journal {path} belongs to job {header.get('job_id')!r}, not {job_id!r}"
        )

    results: dict[str, Any] = {}
    for record in records[1:]:
        if record.get("record_type") != "RESULT" or record.get("status") != "SUCCESS":
            continue
        results[str(record.get("key"))] = record.get("value")
    return results


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_journal(path: Path) -> ValidationResult:
    if not path.exists():
        return ValidationResult(is_valid=False, errors=[f"File not found: {path}"])

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        return ValidationResult(is_valid=False, errors=[f"Cannot read journal: {exc}"])

    errors: list[str] = []
    saw_header = False
    for index, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            errors.append(f"line {index}: invalid JSON ({exc})")
            continue

        record_type = record.get("record_type")
        if record_type == "JOB":
            if saw_header:
                errors.append(f"line {index}: duplicate JOB header")
            elif index != 1:
                errors.append(f"line {index}: JOB header must be the first record")
            if not record.get("job_id"):
                errors.append(f"line {index}: JOB header is missing job_id")
            saw_header = True
            continue
        if record_type != "RESULT":
            errors.append(f"line {index}: unknown record_type {record_type!r}")
            continue

        missing = [key for key in ("key", "status") if record.get(key) in {None, ""}]
        if missing:
            errors.append(f"line {index}: missing fields {', '.join(missing)}")
            continue
        status = str(record.get("status"))
        if status not in VALID_STATUS:
            errors.append(f"line {index}: invalid status {status}")

    if not saw_header:
        errors.append("missing JOB header")
    return ValidationResult(is_valid=len(errors) == 0, errors=errors)


@dataclass
class JournalSummary:
    job_id: Optional[str]
    succeeded: int
    failed: int
    pending_keys: list[str]


def summarize_journal(path: Path) -> JournalSummary:
    """Count keys by their latest status; failed keys without a later success are pending."""
    records = read_journal_records(path)
    job_id = None
    latest: dict[str, str] = {}
    for record in records:
        if record.get("record_type") == "JOB":
            job_id = str(record.get("job_id")) if record.get("job_id") else None
            continue
        if record.get("record_type") != "RESULT" or not record.get("key"):
            continue
        latest[str(record["key"])] = str(record.get("status", ""))

    pending = sorted(key for key, status in latest.items() if status == "FAILED")
    succeeded = sum(1 for status in latest.values() if status == "SUCCESS")
    return JournalSummary(job_id=job_id, succeeded=succeeded, failed=len(pending), pending_keys=pending)
