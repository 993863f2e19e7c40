"""Shared helpers."""

from . import file_ops, image_utils
from .cancel import CancelledError, CancellationToken

__all__ = ["file_ops", "image_utils", "CancelledError", "CancellationToken"]
