"""Cooperative cancellation."""

from __future__ import annotations

import threading


class CancelledError(Exception):
    """Raised when a job was cancelled by its caller."""


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def set(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return bool(self._event.is_set())

    def raise_if_cancelled(self, message: str = "Cancelled") -> None:
        if self.is_cancelled():
            raise CancelledError(message)
