# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""
Handler failure types.

Each failure maps to one handler error code. Handlers raise these for
conditions they detect themselves (invalid tags, immutable field changes,
missing identifiers, lifecycles that never settle). The step executor
catches them at the step boundary and turns them into a FAILED progress
event; they are never retried by this layer.

Remote service errors are a separate family (see ``clients.fsx_client``)
and only become failures through the error classifier.
"""

from typing import Optional

from .models.enums import HandlerErrorCode
from .models.resource import TYPE_NAME


class HandlerFailure(Exception):
    """Base exception for failures that end an operation with an error code."""

    error_code: HandlerErrorCode = HandlerErrorCode.INTERNAL_FAILURE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(HandlerFailure):
    """The association does not exist or was not identified."""

    error_code = HandlerErrorCode.NOT_FOUND

    def __init__(self, message: str, identifier: Optional[str] = None):
        self.identifier = identifier
        super().__init__(message)

    @classmethod
    def missing_identifier(cls) -> "NotFoundError":
        return cls("Parameter 'AssociationId' must be provided.")

    @classmethod
    def does_not_exist(cls, identifier: Optional[str]) -> "NotFoundError":
        return cls(
            f"Data repository association does not exist for: {identifier}.",
            identifier=identifier,
        )


class InvalidRequestError(HandlerFailure):
    """The request is malformed."""

    error_code = HandlerErrorCode.INVALID_REQUEST


class InvalidTagFormatError(InvalidRequestError):
    """A tag key or value does not match the allowed pattern."""

    def __init__(self, index: int, field: str, invalid_value: str, pattern: str):
        self.index = index
        self.field = field
        self.invalid_value = invalid_value
        self.pattern = pattern
        super().__init__(
            f"1 validation error detected: Value '{invalid_value}' at "
            f"'tags.{index}.member.{field}' failed to satisfy constraint: "
            f"Member must satisfy regular expression pattern: {pattern}"
        )


class NotUpdatableError(HandlerFailure):
    """An immutable property differs between the previous and desired state."""

    error_code = HandlerErrorCode.NOT_UPDATABLE

    def __init__(self, property_name: str):
        self.property_name = property_name
        super().__init__(f"Parameter '{property_name}' is not updatable.")


class NotStabilizedError(HandlerFailure):
    """The association entered a failed lifecycle or never settled in time."""

    error_code = HandlerErrorCode.NOT_STABILIZED

    def __init__(self, identifier: Optional[str], reason: Optional[str] = None):
        self.identifier = identifier
        self.reason = reason
        message = f"Resource of type '{TYPE_NAME}' with identifier '{identifier}' did not stabilize."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
