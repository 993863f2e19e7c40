"""Registry of provider adapters, keyed by service name and data type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..config import ConfigManager
from .interfaces import Exporter, Importer

ExporterFactory = Callable[[ConfigManager, dict[str, Any]], Exporter]
ImporterFactory = Callable[[ConfigManager, dict[str, Any]], Importer]


class UnknownServiceError(LookupError):
    pass


@dataclass
class _Registration:
    exporter: Optional[ExporterFactory] = None
    importer: Optional[ImporterFactory] = None


class ProviderRegistry:
    def __init__(self) -> None:
        self._providers: dict[tuple[str, str], _Registration] = {}

    def register(
        self,
        service: str,
        data_type: str,
        *,
        exporter: Optional[ExporterFactory] = None,
        importer: Optional[ImporterFactory] = None,
    ) -> None:
        if exporter is None and importer is None:
            raise ValueError("register needs an exporter or an importer factory")
        key = (service.lower(), data_type.lower())
        registration = self._providers.setdefault(key, _Registration())
        if exporter is not None:
            registration.exporter = exporter
        if importer is not None:
            registration.importer = importer

    def exporter_for(
        self,
        service: str,
        data_type: str,
        config: ConfigManager,
        options: Optional[dict[str, Any]] = None,
    ) -> Exporter:
        registration = self._providers.get((service.lower(), data_type.lower()))
        if registration is None or registration.exporter is None:
            raise UnknownServiceError(f"No exporter for {service}/{data_type}")
        return registration.exporter(config, dict(options or {}))

    def importer_for(
        self,
        service: str,
        data_type: str,
        config: ConfigManager,
        options: Optional[dict[str, Any]] = None,
    ) -> Importer:
        registration = self._providers.get((service.lower(), data_type.lower()))
        if registration is None or registration.importer is None:
            raise UnknownServiceError(f"No importer for {service}/{data_type}")
        return registration.importer(config, dict(options or {}))

    def data_types(self) -> list[str]:
        return sorted({data_type for _service, data_type in self._providers})

    def list_services(self, data_type: str) -> tuple[list[str], list[str]]:
        """Return (export services, import services) supporting ``data_type``."""
        wanted = data_type.lower()
        export_services: list[str] = []
        import_services: list[str] = []
        for (service, registered_type), registration in self._providers.items():
            if registered_type != wanted:
                continue
            if registration.exporter is not None:
                export_services.append(service)
            if registration.importer is not None:
                import_services.append(service)
        return sorted(export_services), sorted(import_services)
