"""File operations with retry, used by the local provider."""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
import hashlib
import shutil
import time
from pathlib import Path
from typing import Any, Callable, Optional

from ..config.manager import ConfigManager
from .cancel import CancelledError, CancellationToken
from .logger import get_logger


@dataclass
class OperationResult:
    success: bool
    error_message: Optional[str] = None
    retry_count: int = 0
    elapsed_time: float = 0.0
    value: Any = None


def safe_op(
    *,
    config,
    max_retries: Optional[int] = None,
    backoff_base_sec: Optional[float] = None,
    backoff_cap_sec: Optional[float] = None,
    exceptions: Optional[tuple[type[BaseException], ...]] = None,
    logger=None,
) -> Callable:
    """Wrap a file operation with retries and exponential backoff."""

    cfg_get = getattr(config, "get", None)
    if not callable(cfg_get):
        raise TypeError("config must provide get(key, default)")

    resolved_max = int(max_retries if max_retries is not None else cfg_get("file_ops.max_retries", 3))
    resolved_base = float(
        backoff_base_sec if backoff_base_sec is not None else cfg_get("file_ops.backoff_base_sec", 0.5)
    )
    resolved_cap = float(
        backoff_cap_sec if backoff_cap_sec is not None else cfg_get("file_ops.backoff_cap_sec", 10.0)
    )
    resolved_exceptions = exceptions if exceptions is not None else (OSError,)
    op_logger = logger or get_logger("FileOps")

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> OperationResult:
            start_time = time.time()
            last_error: BaseException | None = None

            for attempt in range(resolved_max + 1):
                try:
                    value = func(*args, **kwargs)
                    return OperationResult(
                        success=True,
                        retry_count=attempt,
                        elapsed_time=time.time() - start_time,
                        value=value,
                    )
                except resolved_exceptions as exc:
                    last_error = exc
                    if attempt < resolved_max:
                        wait_time = min(resolved_base * (2**attempt), resolved_cap)
                        op_logger.warning(
                            "File operation retry %s/%s in %.2fs: %s",
                            attempt + 1,
                            resolved_max,
                            wait_time,
                            exc,
                        )
                        time.sleep(wait_time)
                    else:
                        op_logger.error("File operation failed after %s retries: %s", resolved_max, exc)

            return OperationResult(
                success=False,
                error_message=str(last_error) if last_error is not None else "Unknown error",
                retry_count=resolved_max,
                elapsed_time=time.time() - start_time,
            )

        return wrapper

    return decorator


def _resolve_config(config) -> ConfigManager:
    if config is None:
        return ConfigManager()
    return config


def safe_copy2(
    src_path: Path,
    dst_path: Path,
    *,
    config=None,
    cancel_token: Optional[CancellationToken] = None,
    max_retries: Optional[int] = None,
    backoff_base_sec: Optional[float] = None,
    backoff_cap_sec: Optional[float] = None,
    logger=None,
) -> OperationResult:
    cfg = _resolve_config(config)

    @safe_op(
        config=cfg,
        max_retries=max_retries,
        backoff_base_sec=backoff_base_sec,
        backoff_cap_sec=backoff_cap_sec,
        logger=logger,
    )
    def _copy() -> Path:
        if cancel_token is not None and cancel_token.is_cancelled():
            raise CancelledError(f"Copy cancelled: {src_path}")
        shutil.copy2(src_path, dst_path)
        return dst_path

    return _copy()


def safe_makedirs(
    path: Path,
    *,
    config=None,
    max_retries: Optional[int] = None,
    backoff_base_sec: Optional[float] = None,
    backoff_cap_sec: Optional[float] = None,
    logger=None,
) -> OperationResult:
    cfg = _resolve_config(config)

    @safe_op(
        config=cfg,
        max_retries=max_retries,
        backoff_base_sec=backoff_base_sec,
        backoff_cap_sec=backoff_cap_sec,
        logger=logger,
    )
    def _makedirs() -> Path:
        path.mkdir(parents=True, exist_ok=True)
        return path

    return _makedirs()


def file_digest(
    path: Path,
    algorithm: str = "sha256",
    chunk_size_kb: int = 1024,
    cancel_token: Optional[CancellationToken] = None,
) -> str:
    hasher = hashlib.new(algorithm)
    with path.open("rb") as handle:
        while True:
            if cancel_token is not None and cancel_token.is_cancelled():
                raise CancelledError(f"Hashing cancelled: {path}")
            chunk = handle.read(chunk_size_kb * 1024)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def same_content(
    first: Path,
    second: Path,
    *,
    cancel_token: Optional[CancellationToken] = None,
) -> bool:
    if first.stat().st_size != second.stat().st_size:
        return False
    return file_digest(first, cancel_token=cancel_token) == file_digest(second, cancel_token=cancel_token)


def copy_into(
    src_path: Path,
    dst_dir: Path,
    *,
    dst_name: Optional[str] = None,
    config=None,
    cancel_token: Optional[CancellationToken] = None,
    logger=None,
) -> Path:
    """Copy one file into ``dst_dir`` and return the destination path.

    A destination that already holds the same bytes is accepted as is, so a
    repeated import of the same photo is harmless. A different file under the
    same name raises ``FileExistsError``; ``OSError`` once retries are exhausted.
    """
    logger = logger or get_logger("FileOps")
    cfg = _resolve_config(config)

    mkdir_result = safe_makedirs(dst_dir, config=cfg, logger=logger)
    if not mkdir_result.success:
        raise OSError(mkdir_result.error_message)

    dst_path = dst_dir / (dst_name or src_path.name)
    if dst_path.exists():
        if same_content(src_path, dst_path, cancel_token=cancel_token):
            logger.info(f"ALREADY PRESENT: {src_path} -> {dst_path}")
            return dst_path
        raise FileExistsError(f"Destination already exists: {dst_path}")

    # Written under a hidden name first so an interrupted copy never looks complete.
    part_path = dst_path.with_name(f".{dst_path.name}.part")
    copy_result = safe_copy2(src_path, part_path, config=cfg, cancel_token=cancel_token, logger=logger)
    if not copy_result.success:
        raise OSError(copy_result.error_message)
    part_path.replace(dst_path)
    logger.info(f"COPIED: {src_path} -> {dst_path}")
    return dst_path
