"""Drives one exporter/importer pair through a job's whole resource tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..config import ConfigManager
from ..models import (
    AuthData,
    ContinuationRecord,
    CopyEvent,
    CopyEventType,
    ExportOutcome,
    ExportRequest,
    ImportOutcome,
    ProcessError,
)
from ..utils.cancel import CancelledError, CancellationToken
from ..utils.error_handler import ErrorHandler
from ..utils.logger import get_logger
from .idempotent import IdempotentImportCache
from .interfaces import Exporter, Importer
from .retry import RetryClassifier, RetryDecision


@dataclass
class CopyReport:
    job_id: str
    pages_exported: int = 0
    pages_imported: int = 0
    export_attempts: int = 0
    branch_failures: list[ProcessError] = field(default_factory=list)
    item_failures: list[ProcessError] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.branch_failures and not self.cancelled

    def to_dict(self) -> dict[str, object]:
        return {
            "job_id": self.job_id,
            "succeeded": self.succeeded,
            "cancelled": self.cancelled,
            "pages_exported": self.pages_exported,
            "pages_imported": self.pages_imported,
            "export_attempts": self.export_attempts,
            "branch_failures": [failure.to_dict() for failure in self.branch_failures],
            "item_failures": [failure.to_dict() for failure in self.item_failures],
        }

    def summary(self) -> str:
        state = "cancelled" if self.cancelled else ("ok" if self.succeeded else "partial")
        return (
            f"job {self.job_id}: {state}, "
            f"pages exported {self.pages_exported}, imported {self.pages_imported}, "
            f"export attempts {self.export_attempts}, failed branches {len(self.branch_failures)}, "
            f"skipped items {len(self.item_failures)}"
        )


@dataclass(frozen=True)
class _Frame:
    request: ExportRequest
    depth: int


class DataCopier:
    """Depth-first copy of a job, one page at a time.

    For every request the page is exported (with retries), imported, then its
    next page is walked to the end before the children found on this page are
    visited in discovery order. Pending work lives on an explicit stack, so
    long pagination chains and deep hierarchies do not grow the Python stack.
    A failed branch is recorded and skipped; its siblings and ancestors carry on.
    """

    def __init__(
        self,
        exporter: Exporter,
        importer: Importer,
        *,
        config: Optional[ConfigManager] = None,
        classifier: Optional[RetryClassifier] = None,
        logger=None,
    ) -> None:
        self.exporter = exporter
        self.importer = importer
        self.config = config or ConfigManager()
        self.classifier = classifier or RetryClassifier.from_config(self.config)
        self.logger = logger or get_logger(self.__class__.__name__)

    def copy(
        self,
        job_id: str,
        export_auth: AuthData,
        import_auth: AuthData,
        *,
        cache: Optional[IdempotentImportCache] = None,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[CopyEvent], None]] = None,
    ) -> CopyReport:
        owns_cache = cache is None
        if cache is None:
            cache = IdempotentImportCache.for_job(job_id, self.config, logger=self.logger)
        elif cache.job_id != job_id:
            raise ValueError(f"Cache belongs to job {cache.job_id}, not {job_id}")

        report = CopyReport(job_id=job_id)
        errors = ErrorHandler()
        stack: list[_Frame] = [_Frame(ExportRequest(), depth=0)]
        iteration = 0

        self.logger.info("Starting copy for job %s", job_id)
        self._emit(progress_callback, CopyEvent(event_type=CopyEventType.JOB_START, job_id=job_id))
        try:
            while stack:
                frame = stack.pop()
                if cancel_token is not None and cancel_token.is_cancelled():
                    raise CancelledError(f"Job {job_id} cancelled")

                iteration += 1
                self.logger.debug("copy iteration: %s", iteration)
                continuation = self._copy_page(
                    job_id,
                    export_auth,
                    import_auth,
                    frame,
                    cache=cache,
                    report=report,
                    errors=errors,
                    cancel_token=cancel_token,
                    progress_callback=progress_callback,
                )
                if continuation is None:
                    continue

                # Children go below the next page so the whole pagination chain
                # (and everything it discovers) is done before this page's children.
                for child in reversed(continuation.children):
                    stack.append(_Frame(ExportRequest(resource=child), depth=frame.depth + 1))
                if continuation.next_token is not None:
                    stack.append(
                        _Frame(
                            ExportRequest(token=continuation.next_token, resource=frame.request.resource),
                            depth=frame.depth,
                        )
                    )
        except CancelledError as exc:
            report.cancelled = True
            self.logger.warning("Copy stopped: %s (%s pending requests dropped)", exc, len(stack))
        finally:
            if owns_cache:
                cache.close()

        report.branch_failures = errors.snapshot()
        report.item_failures = cache.errors()
        self.logger.info(report.summary())
        self._emit(
            progress_callback,
            CopyEvent(
                event_type=CopyEventType.JOB_END,
                job_id=job_id,
                status="CANCELLED" if report.cancelled else ("DONE" if report.succeeded else "PARTIAL"),
            ),
        )
        return report

    def _copy_page(
        self,
        job_id: str,
        export_auth: AuthData,
        import_auth: AuthData,
        frame: _Frame,
        *,
        cache: IdempotentImportCache,
        report: CopyReport,
        errors: ErrorHandler,
        cancel_token: Optional[CancellationToken],
        progress_callback: Optional[Callable[[CopyEvent], None]],
    ) -> Optional[ContinuationRecord]:
        request = frame.request
        resource_id = request.describe()
        self._emit(
            progress_callback,
            CopyEvent(
                event_type=CopyEventType.BRANCH_START,
                job_id=job_id,
                resource_id=resource_id,
                token=str(request.token) if request.token else None,
                depth=frame.depth,
            ),
        )

        outcome, attempts, decision = self._run_export_logic(
            job_id, export_auth, request, cancel_token=cancel_token, progress_callback=progress_callback
        )
        report.export_attempts += attempts
        if outcome.is_error:
            fatal = decision is not None and not decision.can_retry
            self.logger.warning(
                "Error happened during export of %s after %s attempt(s): %s",
                resource_id,
                attempts,
                outcome.message,
            )
            errors.add_fatal(
                "E-EXPORT-FATAL" if fatal else "E-EXPORT",
                outcome.message or "export failed",
                resource_id=resource_id,
            )
            self._emit_failure(progress_callback, job_id, resource_id, frame.depth, outcome.message)
            return None
        report.pages_exported += 1

        self.logger.debug("Starting import")
        import_outcome = self._import(job_id, cache, import_auth, outcome.payload)
        self.logger.debug("Finished import")
        if import_outcome.is_error:
            self.logger.warning("Error happened during import of %s: %s", resource_id, import_outcome.message)
            errors.add_fatal("E-IMPORT", import_outcome.message or "import failed", resource_id=resource_id)
            self._emit_failure(progress_callback, job_id, resource_id, frame.depth, import_outcome.message)
            return None
        report.pages_imported += 1
        self._emit(
            progress_callback,
            CopyEvent(
                event_type=CopyEventType.PAGE_IMPORTED,
                job_id=job_id,
                resource_id=resource_id,
                depth=frame.depth,
                status=outcome.result_type.value,
            ),
        )

        if not outcome.has_continuation():
            return None
        return outcome.continuation

    def _run_export_logic(
        self,
        job_id: str,
        export_auth: AuthData,
        request: ExportRequest,
        *,
        cancel_token: Optional[CancellationToken],
        progress_callback: Optional[Callable[[CopyEvent], None]],
    ) -> tuple[ExportOutcome, int, Optional[RetryDecision]]:
        attempts = 1
        outcome = self._export(job_id, export_auth, request)
        decision: Optional[RetryDecision] = None

        while outcome.is_error:
            # A later failure may be classified differently from the first one.
            decision = self.classifier.classify(outcome.message)
            if not decision.can_retry or attempts >= decision.max_attempts:
                break
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(f"Job {job_id} cancelled")

            attempts += 1
            self.logger.warning(
                "Retrying export of %s (attempt %s/%s): %s",
                request.describe(),
                attempts,
                decision.max_attempts,
                outcome.message,
            )
            self._emit(
                progress_callback,
                CopyEvent(
                    event_type=CopyEventType.EXPORT_RETRY,
                    job_id=job_id,
                    resource_id=request.describe(),
                    attempt=attempts,
                    message=outcome.message,
                ),
            )
            outcome = self._export(job_id, export_auth, request)

        return outcome, attempts, decision

    def _export(self, job_id: str, export_auth: AuthData, request: ExportRequest) -> ExportOutcome:
        self.logger.debug("Starting export")
        try:
            outcome = self.exporter.export(job_id, export_auth, request)
        except CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - becomes an ERROR outcome subject to retry
            outcome = ExportOutcome.error(str(exc))
        self.logger.debug("Finishing export")
        return outcome

    def _import(
        self,
        job_id: str,
        cache: IdempotentImportCache,
        import_auth: AuthData,
        payload: Any,
    ) -> ImportOutcome:
        try:
            return self.importer.import_item(job_id, cache, import_auth, payload)
        except CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - aborts this branch only
            self.logger.exception("Importer raised for job %s", job_id)
            return ImportOutcome.error(str(exc))

    def _emit_failure(
        self,
        callback: Optional[Callable[[CopyEvent], None]],
        job_id: str,
        resource_id: str,
        depth: int,
        message: Optional[str],
    ) -> None:
        self._emit(
            callback,
            CopyEvent(
                event_type=CopyEventType.BRANCH_FAILED,
                job_id=job_id,
                resource_id=resource_id,
                depth=depth,
                message=message,
            ),
        )

    def _emit(
        self,
        callback: Optional[Callable[[CopyEvent], None]],
        event: CopyEvent,
    ) -> None:
        if callback is None:
            return
        callback(event)
