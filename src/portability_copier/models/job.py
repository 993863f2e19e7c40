"""Job and credential records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AuthData:
    token: Optional[str] = None
    secret: Optional[str] = None
    url: Optional[str] = None

    def __repr__(self) -> str:
        masked = "****" if self.secret else None
        return f"AuthData(token={'****' if self.token else None}, secret={masked}, url={self.url!r})"


@dataclass
class Job:
    job_id: str
    data_type: str
    export_service: str
    import_service: str
    export_auth: AuthData = field(default_factory=AuthData)
    import_auth: AuthData = field(default_factory=AuthData)
    export_options: dict[str, Any] = field(default_factory=dict)
    import_options: dict[str, Any] = field(default_factory=dict)
