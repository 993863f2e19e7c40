"""Data models."""

from .continuation import ContinuationRecord, ExportRequest, PaginationToken, ResourceNode
from .copy_event import CopyEvent, CopyEventType
from .error_record import ErrorLevel, ProcessError
from .job import AuthData, Job
from .photos import PhotoAlbum, PhotoModel, PhotosContainerResource
from .results import ExportOutcome, ImportOutcome, ImportResultType, ResultType

__all__ = [
    "AuthData",
    "ContinuationRecord",
    "CopyEvent",
    "CopyEventType",
    "ErrorLevel",
    "ExportOutcome",
    "ExportRequest",
    "ImportOutcome",
    "ImportResultType",
    "Job",
    "PaginationToken",
    "PhotoAlbum",
    "PhotoModel",
    "PhotosContainerResource",
    "ProcessError",
    "ResourceNode",
    "ResultType",
]
