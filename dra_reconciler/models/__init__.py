"""Data models for the data repository association reconciler."""

from .enums import Action, DataRepositoryLifecycle, HandlerErrorCode, OperationStatus
from .resource import (
    AutoExportPolicy,
    AutoImportPolicy,
    IMMUTABLE_FIELDS,
    ResourceModel,
    S3,
    TYPE_NAME,
    Tag,
)
from .tags import TagSet
from .context import CallbackContext
from .progress import HandlerRequest, ProgressEvent
from .health import HealthStatus

__all__ = [
    "Action",
    "DataRepositoryLifecycle",
    "HandlerErrorCode",
    "OperationStatus",
    "AutoExportPolicy",
    "AutoImportPolicy",
    "IMMUTABLE_FIELDS",
    "ResourceModel",
    "S3",
    "TYPE_NAME",
    "Tag",
    "TagSet",
    "CallbackContext",
    "HandlerRequest",
    "ProgressEvent",
    "HealthStatus",
]
