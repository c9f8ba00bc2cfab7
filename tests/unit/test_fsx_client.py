"""Unit tests for the FSx client wrapper."""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from botocore.stub import Stubber

from dra_reconciler.clients.fsx_client import (
    BadRequest,
    DataRepositoryAssociationNotFound,
    FSxAPIError,
    FSxClient,
    ServiceLimitExceeded,
    translate_client_error,
)

ASSOCIATION_ID = "dra-0123456789abcdef0"
FILE_SYSTEM_ID = "fs-0123456789abcdef0"
ARN = f"arn:aws:fsx:us-east-1:123456789012:association/{FILE_SYSTEM_ID}/{ASSOCIATION_ID}"


@pytest.fixture
def stubbed(test_env):
    """FSxClient over a real boto3 client with a Stubber attached."""
    boto_client = boto3.client("fsx", region_name="us-east-1")
    stubber = Stubber(boto_client)
    with stubber:
        yield FSxClient(region="us-east-1", client=boto_client), stubber
    stubber.assert_no_pending_responses()


def association(lifecycle="AVAILABLE"):
    return {
        "AssociationId": ASSOCIATION_ID,
        "ResourceARN": ARN,
        "FileSystemId": FILE_SYSTEM_ID,
        "Lifecycle": lifecycle,
        "FileSystemPath": "/ns1",
        "DataRepositoryPath": "s3://example-bucket/prefix",
        "ImportedFileChunkSize": 1024,
    }


# =============================================================================
# Successful calls
# =============================================================================

@pytest.mark.asyncio
async def test_describe_by_id(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "describe_data_repository_associations",
        {"Associations": [association()]},
        {"AssociationIds": [ASSOCIATION_ID]},
    )

    response = await client.describe_data_repository_associations(association_ids=[ASSOCIATION_ID])

    assert response["Associations"][0]["AssociationId"] == ASSOCIATION_ID


@pytest.mark.asyncio
async def test_describe_page(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "describe_data_repository_associations",
        {"Associations": [association()], "NextToken": "page-3"},
        {"NextToken": "page-2", "MaxResults": 10},
    )

    response = await client.describe_data_repository_associations(next_token="page-2", max_results=10)

    assert response["NextToken"] == "page-3"


@pytest.mark.asyncio
async def test_describe_first_page_sends_no_parameters(stubbed):
    client, stubber = stubbed
    stubber.add_response("describe_data_repository_associations", {"Associations": []}, {})

    response = await client.describe_data_repository_associations(next_token=None)

    assert response["Associations"] == []


@pytest.mark.asyncio
async def test_create(stubbed):
    client, stubber = stubbed
    request = {
        "FileSystemId": FILE_SYSTEM_ID,
        "FileSystemPath": "/ns1",
        "DataRepositoryPath": "s3://example-bucket/prefix",
        "ClientRequestToken": "token-123",
        "Tags": [{"Key": "Team", "Value": "storage"}],
    }
    stubber.add_response(
        "create_data_repository_association",
        {"Association": association(lifecycle="CREATING")},
        request,
    )

    response = await client.create_data_repository_association(request)

    assert response["Association"]["Lifecycle"] == "CREATING"


@pytest.mark.asyncio
async def test_update_and_delete(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "update_data_repository_association",
        {"Association": association(lifecycle="UPDATING")},
        {"AssociationId": ASSOCIATION_ID, "ImportedFileChunkSize": 2048},
    )
    stubber.add_response(
        "delete_data_repository_association",
        {"AssociationId": ASSOCIATION_ID, "Lifecycle": "DELETING", "DeleteDataInFileSystem": False},
        {"AssociationId": ASSOCIATION_ID, "DeleteDataInFileSystem": False},
    )

    updated = await client.update_data_repository_association(
        {"AssociationId": ASSOCIATION_ID, "ImportedFileChunkSize": 2048}
    )
    deleted = await client.delete_data_repository_association(
        {"AssociationId": ASSOCIATION_ID, "DeleteDataInFileSystem": False}
    )

    assert updated["Association"]["Lifecycle"] == "UPDATING"
    assert deleted["Lifecycle"] == "DELETING"


@pytest.mark.asyncio
async def test_tag_and_untag(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "tag_resource", {}, {"ResourceARN": ARN, "Tags": [{"Key": "a", "Value": "1"}]}
    )
    stubber.add_response("untag_resource", {}, {"ResourceARN": ARN, "TagKeys": ["b"]})

    await client.tag_resource({"ResourceARN": ARN, "Tags": [{"Key": "a", "Value": "1"}]})
    await client.untag_resource({"ResourceARN": ARN, "TagKeys": ["b"]})


# =============================================================================
# Error translation
# =============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "code,exception_class",
    [
        ("BadRequest", BadRequest),
        ("DataRepositoryAssociationNotFound", DataRepositoryAssociationNotFound),
        ("ServiceLimitExceeded", ServiceLimitExceeded),
    ],
)
async def test_client_error_is_typed(stubbed, code, exception_class):
    client, stubber = stubbed
    stubber.add_client_error(
        "describe_data_repository_associations",
        service_error_code=code,
        service_message="Service says no",
    )

    with pytest.raises(exception_class) as exc_info:
        await client.describe_data_repository_associations(association_ids=[ASSOCIATION_ID])

    assert exc_info.value.error_code == code
    assert exc_info.value.message == "Service says no"
    assert isinstance(exc_info.value.__cause__, ClientError)


@pytest.mark.asyncio
async def test_unknown_client_error_is_base_type(stubbed):
    client, stubber = stubbed
    stubber.add_client_error(
        "delete_data_repository_association",
        service_error_code="AccessDeniedException",
        service_message="Not allowed",
    )

    with pytest.raises(FSxAPIError) as exc_info:
        await client.delete_data_repository_association({"AssociationId": ASSOCIATION_ID})

    assert type(exc_info.value) is FSxAPIError
    assert exc_info.value.error_code == "AccessDeniedException"


@pytest.mark.asyncio
async def test_botocore_error_is_wrapped():
    boto_client = MagicMock()
    boto_client.describe_data_repository_associations.side_effect = EndpointConnectionError(
        endpoint_url="https://fsx.us-east-1.amazonaws.com"
    )
    client = FSxClient(client=boto_client)

    with pytest.raises(FSxAPIError) as exc_info:
        await client.describe_data_repository_associations(association_ids=[ASSOCIATION_ID])

    assert "Boto3 error" in exc_info.value.message


def test_translate_client_error_without_message():
    error = ClientError({"Error": {"Code": "InternalServerError"}}, "CreateDataRepositoryAssociation")

    translated = translate_client_error(error)

    assert translated.error_code == "InternalServerError"
    assert translated.message


def test_client_uses_region(test_env):
    client = FSxClient(region="eu-west-1")

    assert client.region == "eu-west-1"
    assert client.fsx.meta.region_name == "eu-west-1"
