"""Retry policy for export failures."""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import fnmatch
from typing import Iterable, Optional

from ..config import ConfigManager

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_FATAL_PATTERNS = ("*fatal*",)


@dataclass(frozen=True)
class RetryDecision:
    can_retry: bool
    max_attempts: int
    matched_pattern: Optional[str] = None


class RetryClassifier:
    """Decides whether an export failure message is transient or fatal.

    A message matching any fatal pattern is fatal and never retried. Anything
    else, including an empty or missing message, is retryable up to
    ``max_attempts`` total invocations with no delay in between.
    """

    def __init__(
        self,
        fatal_patterns: Iterable[str] = DEFAULT_FATAL_PATTERNS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        match_mode: str = "glob",
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if match_mode not in {"glob", "substring", "regex"}:
            raise ValueError(f"Unknown match mode: {match_mode}")
        self.fatal_patterns = tuple(fatal_patterns)
        self.max_attempts = max_attempts
        self.match_mode = match_mode
        self._compiled = (
            [re.compile(pattern) for pattern in self.fatal_patterns] if match_mode == "regex" else []
        )

    @classmethod
    def from_config(cls, config: ConfigManager) -> "RetryClassifier":
        return cls(
            fatal_patterns=config.get("retry.fatal_patterns", list(DEFAULT_FATAL_PATTERNS)),
            max_attempts=int(config.get("retry.max_attempts", DEFAULT_MAX_ATTEMPTS)),
            match_mode=str(config.get("retry.match_mode", "glob")),
        )

    def classify(self, message: Optional[str]) -> RetryDecision:
        if not message:
            return RetryDecision(can_retry=True, max_attempts=self.max_attempts)

        pattern = self._match_fatal(message)
        if pattern is not None:
            return RetryDecision(can_retry=False, max_attempts=0, matched_pattern=pattern)
        return RetryDecision(can_retry=True, max_attempts=self.max_attempts)

    def _match_fatal(self, message: str) -> Optional[str]:
        if self.match_mode == "regex":
            for compiled in self._compiled:
                if compiled.search(message):
                    return compiled.pattern
            return None

        lowered = message.lower()
        for pattern in self.fatal_patterns:
            if self.match_mode == "substring":
                if pattern.lower() in lowered:
                    return pattern
            elif fnmatch(lowered, pattern.lower()):
                return pattern
        return None
