"""Unit tests for FSx error classification."""

import pytest

from dra_reconciler.clients.fsx_client import (
    BadRequest,
    DataRepositoryAssociationNotFound,
    FileSystemNotFound,
    FSxAPIError,
    IncompatibleParameterError,
    InternalServerError,
    InvalidDataRepositoryType,
    ResourceNotFound,
    ServiceLimitExceeded,
)
from dra_reconciler.models import HandlerErrorCode, OperationStatus
from dra_reconciler.services.error_classifier import (
    EXCEPTION_TO_ERROR_CODE,
    classify,
    handle_error,
)


@pytest.mark.parametrize(
    "exception_class,expected",
    [
        (FileSystemNotFound, HandlerErrorCode.NOT_FOUND),
        (ResourceNotFound, HandlerErrorCode.NOT_FOUND),
        (DataRepositoryAssociationNotFound, HandlerErrorCode.NOT_FOUND),
        (BadRequest, HandlerErrorCode.INVALID_REQUEST),
        (IncompatibleParameterError, HandlerErrorCode.INVALID_REQUEST),
        (InvalidDataRepositoryType, HandlerErrorCode.INVALID_REQUEST),
        (InternalServerError, HandlerErrorCode.INTERNAL_FAILURE),
        (ServiceLimitExceeded, HandlerErrorCode.SERVICE_LIMIT_EXCEEDED),
    ],
)
def test_classified_errors(exception_class, expected):
    error = exception_class("service said no", error_code=exception_class.__name__)

    event = handle_error(error)

    assert classify(error) == expected
    assert event.status == OperationStatus.FAILED
    assert event.error_code == expected
    assert event.message == "service said no"


def test_unclassified_fsx_error_is_reraised():
    error = FSxAPIError("Rate exceeded", error_code="ThrottlingException")

    assert classify(error) is None
    with pytest.raises(FSxAPIError) as exc_info:
        handle_error(error)
    assert exc_info.value is error


def test_arbitrary_exception_is_reraised():
    with pytest.raises(KeyError):
        handle_error(KeyError("Association"))


def test_subclass_of_classified_error_is_not_classified():
    class CustomNotFound(ResourceNotFound):
        pass

    assert classify(CustomNotFound("x")) is None


def test_mapping_is_read_only():
    with pytest.raises(TypeError):
        EXCEPTION_TO_ERROR_CODE[KeyError] = HandlerErrorCode.NOT_FOUND
