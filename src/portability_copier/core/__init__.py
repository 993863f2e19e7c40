"""Copy engine."""

from .copier import CopyReport, DataCopier
from .idempotent import IdempotentImportCache, ImportStepError
from .interfaces import Exporter, Importer, InMemoryJobStore, JobNotFoundError, JobStore
from .journal import (
    JournalSummary,
    JournalWriter,
    ValidationResult,
    journal_path_for,
    load_successful_results,
    read_journal_records,
    summarize_journal,
    validate_journal,
)
from .registry import ProviderRegistry, UnknownServiceError
from .retry import RetryClassifier, RetryDecision
from .worker import TransferWorker

__all__ = [
    "CopyReport",
    "DataCopier",
    "Exporter",
    "IdempotentImportCache",
    "ImportStepError",
    "Importer",
    "InMemoryJobStore",
    "JobNotFoundError",
    "JobStore",
    "JournalSummary",
    "JournalWriter",
    "ProviderRegistry",
    "RetryClassifier",
    "RetryDecision",
    "TransferWorker",
    "UnknownServiceError",
    "ValidationResult",
    "journal_path_for",
    "load_successful_results",
    "read_journal_records",
    "summarize_journal",
    "validate_journal",
]
