# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Handler request and progress event models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .context import CallbackContext
from .enums import HandlerErrorCode, OperationStatus
from .resource import ResourceModel


class HandlerRequest(BaseModel):
    """Input supplied by the caller on every invocation."""

    desired_resource_state: Optional[ResourceModel] = Field(
        None, description="Resource as the caller wants it"
    )
    previous_resource_state: Optional[ResourceModel] = Field(
        None, description="Resource as last reported (update only)"
    )
    desired_resource_tags: Optional[dict[str, str]] = Field(
        None, description="Stack-level tags to apply"
    )
    previous_resource_tags: Optional[dict[str, str]] = Field(
        None, description="Stack-level tags applied by the previous operation"
    )
    system_tags: Optional[dict[str, str]] = Field(
        None, description="Platform-injected tags"
    )
    client_request_token: Optional[str] = Field(
        None, description="Idempotency token for create and delete calls"
    )
    next_token: Optional[str] = Field(
        None, description="Pagination cursor (list only)"
    )


class ProgressEvent(BaseModel):
    """Outcome of one handler invocation."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "FAILED",
                "error_code": "NotFound",
                "message": "Data repository association does not exist for: dra-0123456789abcdef0.",
            }
        }
    )

    status: OperationStatus = Field(..., description="Invocation status")
    resource_model: Optional[ResourceModel] = Field(
        None, description="Projected resource on success"
    )
    resource_models: Optional[list[ResourceModel]] = Field(
        None, description="Resources returned by a list invocation"
    )
    callback_context: Optional[CallbackContext] = Field(
        None, description="Context to pass back on the next invocation"
    )
    callback_delay_seconds: int = Field(
        0, description="Seconds to wait before re-invoking", ge=0
    )
    error_code: Optional[HandlerErrorCode] = Field(None, description="Failure code")
    message: Optional[str] = Field(None, description="Failure message")
    next_token: Optional[str] = Field(None, description="Pagination cursor (list only)")

    @classmethod
    def progress(
        cls,
        model: Optional[ResourceModel],
        context: CallbackContext,
        callback_delay_seconds: int = 0,
    ) -> "ProgressEvent":
        return cls(
            status=OperationStatus.IN_PROGRESS,
            resource_model=model,
            callback_context=context,
            callback_delay_seconds=callback_delay_seconds,
        )

    @classmethod
    def success(cls, model: Optional[ResourceModel]) -> "ProgressEvent":
        return cls(status=OperationStatus.SUCCESS, resource_model=model)

    @classmethod
    def failed(cls, error_code: HandlerErrorCode, message: str) -> "ProgressEvent":
        return cls(status=OperationStatus.FAILED, error_code=error_code, message=message)

    @property
    def is_in_progress(self) -> bool:
        return self.status == OperationStatus.IN_PROGRESS

    @property
    def is_failed(self) -> bool:
        return self.status == OperationStatus.FAILED
