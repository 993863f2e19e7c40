"""Resumption data for the copy walk: tokens, resource nodes and continuation records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class PaginationToken:
    """Opaque page marker, only meaningful to the exporter and resource type that produced it."""

    token: str

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class ResourceNode:
    """A container discovered during export, e.g. the album with id X."""

    resource_id: str
    resource_type: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class ContinuationRecord:
    """What is left after one export call: the next page and the children found on this page."""

    next_token: Optional[PaginationToken] = None
    children: Tuple[ResourceNode, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    @classmethod
    def of(
        cls,
        next_token: Optional[str | PaginationToken] = None,
        children: Iterable[ResourceNode] = (),
    ) -> "ContinuationRecord":
        if isinstance(next_token, str):
            next_token = PaginationToken(next_token)
        return cls(next_token=next_token, children=tuple(children))

    def is_empty(self) -> bool:
        return self.next_token is None and not self.children


@dataclass(frozen=True)
class ExportRequest:
    """Token and resource for one export call; both absent means the job's root."""

    token: Optional[PaginationToken] = None
    resource: Optional[ResourceNode] = None

    def describe(self) -> str:
        resource = self.resource.resource_id if self.resource is not None else "<root>"
        if self.token is None:
            return resource
        return f"{resource}@{self.token}"
