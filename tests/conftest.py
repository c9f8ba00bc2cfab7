"""Pytest configuration and shared fixtures."""

from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from dra_reconciler.clients.fsx_client import FSxClient
from dra_reconciler.models import HandlerRequest, ResourceModel
from dra_reconciler.services.step_executor import StepExecutor

ASSOCIATION_ID = "dra-0123456789abcdef0"
FILE_SYSTEM_ID = "fs-0123456789abcdef0"
RESOURCE_ARN = f"arn:aws:fsx:us-east-1:123456789012:association/{FILE_SYSTEM_ID}/{ASSOCIATION_ID}"


@pytest.fixture
def anyio_backend():
    """Configure anyio backend for async tests."""
    return "asyncio"


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_env(monkeypatch):
    """Set up test environment variables."""
    test_vars = {
        "AWS_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


# =============================================================================
# Remote state helpers
# =============================================================================

def make_association(
    lifecycle: str = "AVAILABLE",
    association_id: str = ASSOCIATION_ID,
    chunk_size: Optional[int] = 1024,
    s3: Optional[dict[str, Any]] = None,
    tags: Optional[list[dict[str, str]]] = None,
    failure_message: Optional[str] = None,
) -> dict[str, Any]:
    """Build a describe-style association dict."""
    association: dict[str, Any] = {
        "AssociationId": association_id,
        "ResourceARN": RESOURCE_ARN,
        "FileSystemId": FILE_SYSTEM_ID,
        "Lifecycle": lifecycle,
        "FileSystemPath": "/ns1",
        "DataRepositoryPath": "s3://example-bucket/prefix",
        "BatchImportMetaDataOnCreate": False,
    }
    if chunk_size is not None:
        association["ImportedFileChunkSize"] = chunk_size
    if s3 is not None:
        association["S3"] = s3
    if tags is not None:
        association["Tags"] = tags
    if failure_message:
        association["FailureDetails"] = {"Message": failure_message}
    return association


def describe_response(*associations: dict[str, Any], next_token: Optional[str] = None) -> dict[str, Any]:
    response: dict[str, Any] = {"Associations": list(associations)}
    if next_token:
        response["NextToken"] = next_token
    return response


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mock_fsx_client():
    """Create a mock FSx client with every call returning an empty success."""
    client = MagicMock(spec=FSxClient)
    client.create_data_repository_association = AsyncMock(
        return_value={"Association": make_association(lifecycle="CREATING")}
    )
    client.describe_data_repository_associations = AsyncMock(
        return_value=describe_response(make_association())
    )
    client.update_data_repository_association = AsyncMock(return_value={})
    client.delete_data_repository_association = AsyncMock(return_value={})
    client.tag_resource = AsyncMock(return_value={})
    client.untag_resource = AsyncMock(return_value={})
    return client


@pytest.fixture
def mock_sleep():
    """Sleep primitive that returns immediately."""
    return AsyncMock(return_value=None)


@pytest.fixture
def executor(mock_sleep):
    """Step executor with a frozen clock and no real delays."""
    return StepExecutor(
        poll_interval_seconds=5.0,
        max_wait_seconds=120 * 60,
        sleep=mock_sleep,
        clock=lambda: 1_000_000.0,
    )


@pytest.fixture
def base_model():
    """A resource model as the host would send it for an existing association."""
    return ResourceModel(
        association_id=ASSOCIATION_ID,
        resource_arn=RESOURCE_ARN,
        file_system_id=FILE_SYSTEM_ID,
        file_system_path="/ns1",
        data_repository_path="s3://example-bucket/prefix",
        batch_import_meta_data_on_create=False,
        imported_file_chunk_size=1024,
    )


@pytest.fixture
def make_request():
    """Factory for handler requests."""
    def _make(**kwargs) -> HandlerRequest:
        kwargs.setdefault("client_request_token", "token-123")
        return HandlerRequest(**kwargs)
    return _make


@pytest.fixture
def association_factory():
    """Factory for describe-style association dicts."""
    return make_association


@pytest.fixture
def describe_factory():
    """Factory for describe responses."""
    return describe_response
