"""FSx client wrapper for data repository association calls."""

import asyncio
import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class FSxAPIError(Exception):
    """Raised when an FSx API call fails."""

    def __init__(self, message: str, error_code: str = ""):
        self.error_code = error_code
        self.message = message
        super().__init__(message)


class BadRequest(FSxAPIError):
    pass


class IncompatibleParameterError(FSxAPIError):
    pass


class InvalidDataRepositoryType(FSxAPIError):
    pass


class FileSystemNotFound(FSxAPIError):
    pass


class ResourceNotFound(FSxAPIError):
    pass


class DataRepositoryAssociationNotFound(FSxAPIError):
    pass


class InternalServerError(FSxAPIError):
    pass


class ServiceLimitExceeded(FSxAPIError):
    pass


# FSx error codes as they appear in ClientError responses
ERROR_CODE_TO_EXCEPTION: dict[str, type[FSxAPIError]] = {
    "BadRequest": BadRequest,
    "IncompatibleParameterError": IncompatibleParameterError,
    "InvalidDataRepositoryType": InvalidDataRepositoryType,
    "FileSystemNotFound": FileSystemNotFound,
    "ResourceNotFound": ResourceNotFound,
    "DataRepositoryAssociationNotFound": DataRepositoryAssociationNotFound,
    "InternalServerError": InternalServerError,
    "ServiceLimitExceeded": ServiceLimitExceeded,
}


def translate_client_error(error: ClientError) -> FSxAPIError:
    """
    Convert a botocore ClientError into the matching typed FSx error.

    Args:
        error: The ClientError raised by boto3

    Returns:
        Typed FSxAPIError subclass, or a plain FSxAPIError for unknown codes
    """
    details = error.response.get("Error", {})
    error_code = details.get("Code", "")
    message = details.get("Message") or str(error)
    exception_class = ERROR_CODE_TO_EXCEPTION.get(error_code, FSxAPIError)
    return exception_class(message, error_code=error_code)


class FSxClient:
    """
    Wrapper around the boto3 FSx client.

    Uses the default credential chain - no hardcoded credentials. The wrapper
    holds no per-operation state, so one instance can serve every step of an
    operation. Retries of transient errors are left to botocore's retry mode.
    """

    def __init__(self, region: str = "us-east-1", client: Any = None):
        """
        Initialize the FSx client.

        Args:
            region: AWS region of the file systems
            client: Pre-built boto3 FSx client (tests, custom sessions)
        """
        config = Config(
            region_name=region,
            retries={
                'max_attempts': 3,
                'mode': 'adaptive'
            }
        )

        self.region = region
        self.fsx = client or boto3.client('fsx', config=config)

    async def _call(self, operation: str, **kwargs) -> dict[str, Any]:
        """
        Call an FSx API in the default executor and translate its errors.

        Args:
            operation: Name of the boto3 client method
            **kwargs: Request parameters

        Returns:
            Response from the FSx API

        Raises:
            FSxAPIError: Typed error for the FSx error code
        """
        func = getattr(self.fsx, operation)
        try:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, lambda: func(**kwargs))
        except ClientError as e:
            raise translate_client_error(e) from e
        except BotoCoreError as e:
            raise FSxAPIError(f"Boto3 error: {str(e)}") from e

    async def create_data_repository_association(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._call("create_data_repository_association", **request)

    async def describe_data_repository_associations(
        self,
        association_ids: Optional[list[str]] = None,
        next_token: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> dict[str, Any]:
        """
        Describe associations by id, or page through all of them.

        Args:
            association_ids: Associations to describe (omit to list)
            next_token: Pagination cursor from a previous page
            max_results: Page size

        Returns:
            Raw describe response with ``Associations`` and ``NextToken``
        """
        params: dict[str, Any] = {}
        if association_ids:
            params["AssociationIds"] = association_ids
        if next_token:
            params["NextToken"] = next_token
        if max_results:
            params["MaxResults"] = max_results
        return await self._call("describe_data_repository_associations", **params)

    async def update_data_repository_association(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._call("update_data_repository_association", **request)

    async def delete_data_repository_association(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._call("delete_data_repository_association", **request)

    async def tag_resource(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._call("tag_resource", **request)

    async def untag_resource(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._call("untag_resource", **request)
