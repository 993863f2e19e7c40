"""At-most-once execution of side-effecting import steps within one job."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from ..config import ConfigManager
from ..models import ErrorLevel, ProcessError
from ..utils.cancel import CancelledError
from ..utils.logger import get_logger
from .journal import JournalWriter, journal_path_for, load_successful_results

T = TypeVar("T")


class ImportStepError(Exception):
    """A side effect run through the cache failed; nothing was cached for its key."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key
        self.message = message


class IdempotentImportCache:
    """Key -> value store that runs each keyed side effect at most once per job.

    Successful results are cached (and journaled when a journal path is given),
    so retried or resumed imports return the cached value instead of creating
    the artifact again. Failures are recorded but never cached. One instance
    belongs to exactly one job.
    """

    def __init__(self, job_id: str, journal_path: Optional[Path] = None, logger=None) -> None:
        self.job_id = job_id
        self.logger = logger or get_logger(self.__class__.__name__)
        self._lock = threading.RLock()
        self._values: dict[str, Any] = {}
        self._failures: dict[str, ProcessError] = {}
        self._journal: Optional[JournalWriter] = None

        if journal_path is not None:
            if journal_path.exists():
                self._values.update(load_successful_results(journal_path, job_id))
                if self._values:
                    self.logger.info(
                        "Restored %s cached import results for job %s", len(self._values), job_id
                    )
            self._journal = JournalWriter(journal_path, job_id, logger=self.logger)

    @classmethod
    def for_job(cls, job_id: str, config: ConfigManager, logger=None) -> "IdempotentImportCache":
        if not config.get("cache.persist", True):
            return cls(job_id, logger=logger)
        journal_dir = Path(config.get("cache.journal_dir", ".transfer_jobs"))
        return cls(job_id, journal_path=journal_path_for(journal_dir, job_id), logger=logger)

    def __enter__(self) -> "IdempotentImportCache":
        return self

    def __exit__(self, exc_type, exc, traceback) -> None:
        self.close()

    def run_once(
        self,
        key: str,
        side_effect: Callable[[], T],
        description: Optional[str] = None,
    ) -> T:
        """Run ``side_effect`` unless ``key`` already succeeded; raise ``ImportStepError`` on failure."""
        with self._lock:
            if key in self._values:
                self.logger.debug("Skipping %s, already imported", key)
                return self._values[key]

            try:
                value = side_effect()
            except CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001 - recorded and re-raised as ImportStepError
                self._record_failure(key, str(exc), description)
                raise ImportStepError(key, str(exc)) from exc

            self._values[key] = value
            self._failures.pop(key, None)
            self._journal_success(key, value, description)
            return value

    def run_once_and_swallow(
        self,
        key: str,
        side_effect: Callable[[], T],
        description: Optional[str] = None,
    ) -> Optional[T]:
        """Like ``run_once`` but logs and returns ``None`` on failure, for best-effort items."""
        try:
            return self.run_once(key, side_effect, description)
        except ImportStepError as exc:
            self.logger.warning("Import of %s failed, continuing: %s", description or key, exc.message)
            return None

    def lookup(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._values.get(key)

    def is_key_cached(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def errors(self) -> list[ProcessError]:
        with self._lock:
            return list(self._failures.values())

    def failed_keys(self) -> list[str]:
        with self._lock:
            return list(self._failures)

    def close(self) -> None:
        with self._lock:
            if self._journal is not None:
                self._journal.close()

    def _record_failure(self, key: str, message: str, description: Optional[str]) -> None:
        self._failures[key] = ProcessError(
            code="W-IMPORT-ITEM",
            level=ErrorLevel.RECOVERABLE,
            message=f"{description}: {message}" if description else message,
            resource_id=key,
        )
        if self._journal is not None:
            self._journal.write_failure(key, message, description)

    def _journal_success(self, key: str, value: Any, description: Optional[str]) -> None:
        if self._journal is None:
            return
        try:
            self._journal.write_success(key, value, description)
        except TypeError as exc:
            self.logger.warning("Result for %s is not JSON serializable, not journaled: %s", key, exc)
