"""Provider adapters."""

from ..core.registry import ProviderRegistry
from . import local_photos


def default_registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    local_photos.register(registry)
    return registry


__all__ = ["default_registry", "local_photos"]
