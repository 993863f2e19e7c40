"""Configuration validation."""

from __future__ import annotations

import re
from typing import Any

MATCH_MODES = {"glob", "substring", "regex"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_config(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    def add_error(path: str, message: str) -> None:
        errors.append(f"{path}: {message}")

    retry = config.get("retry", {})
    max_attempts = retry.get("max_attempts", 5)
    fatal_patterns = retry.get("fatal_patterns", [])
    match_mode = retry.get("match_mode", "glob")
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        add_error("retry.max_attempts", "must be an integer >= 1")
    if not isinstance(fatal_patterns, list) or any(
        not isinstance(item, str) for item in fatal_patterns
    ):
        add_error("retry.fatal_patterns", "must be a list of strings")
    elif match_mode == "regex":
        for pattern in fatal_patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                add_error("retry.fatal_patterns", f"invalid regex {pattern!r} ({exc})")
    if match_mode not in MATCH_MODES:
        add_error("retry.match_mode", f"must be one of {', '.join(sorted(MATCH_MODES))}")

    cache = config.get("cache", {})
    journal_dir = cache.get("journal_dir", ".transfer_jobs")
    persist = cache.get("persist", True)
    if not isinstance(journal_dir, str) or not journal_dir.strip():
        add_error("cache.journal_dir", "must be a non-empty string")
    if not isinstance(persist, bool):
        add_error("cache.persist", "must be a boolean")

    file_ops = config.get("file_ops", {})
    max_retries = file_ops.get("max_retries", 3)
    backoff_base_sec = file_ops.get("backoff_base_sec", 0.5)
    backoff_cap_sec = file_ops.get("backoff_cap_sec", 10.0)
    if not isinstance(max_retries, int) or max_retries < 0:
        add_error("file_ops.max_retries", "must be an integer >= 0")
    if not isinstance(backoff_base_sec, (int, float)) or backoff_base_sec <= 0:
        add_error("file_ops.backoff_base_sec", "must be a number > 0")
    if not isinstance(backoff_cap_sec, (int, float)) or backoff_cap_sec <= 0:
        add_error("file_ops.backoff_cap_sec", "must be a number > 0")
    if (
        isinstance(backoff_base_sec, (int, float))
        and isinstance(backoff_cap_sec, (int, float))
        and backoff_base_sec > backoff_cap_sec
    ):
        add_error("file_ops", "backoff_base_sec must not exceed backoff_cap_sec")

    local_photos = config.get("local_photos", {})
    for key in ("album_page_size", "photo_page_size"):
        value = local_photos.get(key, 1)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            add_error(f"local_photos.{key}", "must be a positive integer")
    image_extensions = local_photos.get("image_extensions", [])
    if not isinstance(image_extensions, list) or any(
        not isinstance(item, str) for item in image_extensions
    ):
        add_error("local_photos.image_extensions", "must be a list of strings")

    logging_config = config.get("logging", {})
    level = logging_config.get("level", "INFO")
    log_file = logging_config.get("log_file")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        add_error("logging.level", f"must be one of {', '.join(sorted(LOG_LEVELS))}")
    if log_file is not None and not isinstance(log_file, str):
        add_error("logging.log_file", "must be a string or null")

    return errors
