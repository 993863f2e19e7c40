"""Runs a stored job end to end."""

from __future__ import annotations

from typing import Callable, Optional

from ..config import ConfigManager
from ..models import CopyEvent
from ..utils.cancel import CancellationToken
from ..utils.logger import get_logger
from .copier import CopyReport, DataCopier
from .idempotent import IdempotentImportCache
from .interfaces import JobStore
from .registry import ProviderRegistry


class TransferWorker:
    def __init__(
        self,
        job_store: JobStore,
        registry: ProviderRegistry,
        config: Optional[ConfigManager] = None,
        logger=None,
    ) -> None:
        self.job_store = job_store
        self.registry = registry
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)

    def run(
        self,
        job_id: str,
        *,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[CopyEvent], None]] = None,
    ) -> CopyReport:
        job = self.job_store.find_job(job_id)
        self.logger.info(
            "Job %s: %s from %s to %s",
            job.job_id,
            job.data_type,
            job.export_service,
            job.import_service,
        )
        exporter = self.registry.exporter_for(
            job.export_service, job.data_type, self.config, job.export_options
        )
        import_options = dict(job.import_options, cancel_token=cancel_token)
        importer = self.registry.importer_for(
            job.import_service, job.data_type, self.config, import_options
        )
        copier = DataCopier(exporter, importer, config=self.config, logger=self.logger)

        with IdempotentImportCache.for_job(job.job_id, self.config, logger=self.logger) as cache:
            return copier.copy(
                job.job_id,
                job.export_auth,
                job.import_auth,
                cache=cache,
                cancel_token=cancel_token,
                progress_callback=progress_callback,
            )
