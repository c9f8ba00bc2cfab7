"""Enumerations for association lifecycles, operation status and error codes."""

from enum import Enum


class DataRepositoryLifecycle(str, Enum):
    """Lifecycle states reported by FSx for a data repository association."""

    CREATING = "CREATING"
    AVAILABLE = "AVAILABLE"
    MISCONFIGURED = "MISCONFIGURED"
    UPDATING = "UPDATING"
    DELETING = "DELETING"
    FAILED = "FAILED"
    UNKNOWN_TO_SDK_VERSION = "UNKNOWN_TO_SDK_VERSION"

    @classmethod
    def _missing_(cls, value):
        # Lifecycles added to the service after this code was written
        return cls.UNKNOWN_TO_SDK_VERSION


class OperationStatus(str, Enum):
    """Status of a handler invocation."""

    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class HandlerErrorCode(str, Enum):
    """Error codes carried by a failed handler invocation."""

    NOT_FOUND = "NotFound"
    INVALID_REQUEST = "InvalidRequest"
    INTERNAL_FAILURE = "InternalFailure"
    SERVICE_LIMIT_EXCEEDED = "ServiceLimitExceeded"
    NOT_UPDATABLE = "NotUpdatable"
    NOT_STABILIZED = "NotStabilized"


class Action(str, Enum):
    """Handler entry points."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
