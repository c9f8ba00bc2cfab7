# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Classification of FSx errors into handler error codes.

Only documented FSx error conditions are translated into a FAILED progress
event. Any other exception is re-raised unchanged so that it reaches the
caller as an unhandled failure.
"""

import logging
from types import MappingProxyType

from ..clients.fsx_client import (
    BadRequest,
    DataRepositoryAssociationNotFound,
    FileSystemNotFound,
    IncompatibleParameterError,
    InternalServerError,
    InvalidDataRepositoryType,
    ResourceNotFound,
    ServiceLimitExceeded,
)
from ..models.enums import HandlerErrorCode
from ..models.progress import ProgressEvent

logger = logging.getLogger(__name__)

EXCEPTION_TO_ERROR_CODE = MappingProxyType({
    FileSystemNotFound: HandlerErrorCode.NOT_FOUND,
    ResourceNotFound: HandlerErrorCode.NOT_FOUND,
    DataRepositoryAssociationNotFound: HandlerErrorCode.NOT_FOUND,
    BadRequest: HandlerErrorCode.INVALID_REQUEST,
    IncompatibleParameterError: HandlerErrorCode.INVALID_REQUEST,
    InvalidDataRepositoryType: HandlerErrorCode.INVALID_REQUEST,
    InternalServerError: HandlerErrorCode.INTERNAL_FAILURE,
    ServiceLimitExceeded: HandlerErrorCode.SERVICE_LIMIT_EXCEEDED,
})

NOT_FOUND_EXCEPTIONS = (ResourceNotFound, DataRepositoryAssociationNotFound)


def classify(exception: BaseException) -> HandlerErrorCode | None:
    """Return the error code for ``exception``, or None if it is not classified."""
    return EXCEPTION_TO_ERROR_CODE.get(type(exception))


def handle_error(exception: Exception) -> ProgressEvent:
    """
    Translate a classified FSx error into a FAILED progress event.

    Args:
        exception: Error raised by a remote call

    Returns:
        FAILED ProgressEvent with the mapped error code

    Raises:
        Exception: ``exception`` itself when it is not classified
    """
    error_code = classify(exception)
    if error_code is None:
        raise exception
    logger.warning(f"FSx call failed with {type(exception).__name__}: {exception}")
    return ProgressEvent.failed(error_code, str(exception))
