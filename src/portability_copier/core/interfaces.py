"""Boundary contracts for provider adapters and job lookup."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..models import AuthData, ExportOutcome, ExportRequest, ImportOutcome, Job
from .idempotent import IdempotentImportCache


@runtime_checkable
class Exporter(Protocol):
    def export(self, job_id: str, credential: AuthData, request: ExportRequest) -> ExportOutcome:
        ...


@runtime_checkable
class Importer(Protocol):
    def import_item(
        self,
        job_id: str,
        cache: IdempotentImportCache,
        credential: AuthData,
        payload: Any,
    ) -> ImportOutcome:
        ...


class JobNotFoundError(LookupError):
    pass


class JobStore(Protocol):
    def find_job(self, job_id: str) -> Job:
        ...


class InMemoryJobStore:
    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}

    def create_job(self, job: Job) -> Job:
        if job.job_id in self._jobs:
            raise ValueError(f"Job already exists: {job.job_id}")
        self._jobs[job.job_id] = job
        return job

    def find_job(self, job_id: str) -> Job:
        try:
            return self._jobs[job_id]
        except KeyError:
            raise JobNotFoundError(f"Unknown job: {job_id}") from None
