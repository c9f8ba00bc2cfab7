"""Translation between the resource model and FSx API requests and responses.

Request builders return boto3 keyword dicts; projections turn describe
responses back into ``ResourceModel`` instances.
"""

import logging
from typing import Any, Optional

from ..errors import NotFoundError
from ..models.resource import (
    AutoExportPolicy,
    AutoImportPolicy,
    ResourceModel,
    S3,
)
from ..models.tags import TagSet
from .lifecycle import association_from_describe
from .tagging import merge_tag_set, tags_from_sdk, tags_to_sdk

logger = logging.getLogger(__name__)


# =============================================================================
# S3 configuration
# =============================================================================

def s3_model_to_sdk(s3: Optional[S3]) -> Optional[dict[str, Any]]:
    """Convert the model's S3 block to the boto3 ``S3`` parameter."""
    if s3 is None:
        return None
    config: dict[str, Any] = {}
    if s3.auto_import_policy is not None:
        config["AutoImportPolicy"] = {"Events": sorted(s3.auto_import_policy.events)}
    if s3.auto_export_policy is not None:
        config["AutoExportPolicy"] = {"Events": sorted(s3.auto_export_policy.events)}
    return config


def s3_sdk_to_model(association: Optional[dict[str, Any]]) -> Optional[S3]:
    """Read the S3 block of a described association into the model shape."""
    if not association or association.get("S3") is None:
        return None
    sdk_s3 = association["S3"]
    s3 = S3()
    if sdk_s3.get("AutoImportPolicy") is not None:
        s3.auto_import_policy = AutoImportPolicy(
            events=set(sdk_s3["AutoImportPolicy"].get("Events") or [])
        )
    if sdk_s3.get("AutoExportPolicy") is not None:
        s3.auto_export_policy = AutoExportPolicy(
            events=set(sdk_s3["AutoExportPolicy"].get("Events") or [])
        )
    return s3


def _import_policy_or_empty(s3: Optional[S3]) -> AutoImportPolicy:
    if s3 is None or s3.auto_import_policy is None:
        return AutoImportPolicy()
    return s3.auto_import_policy


def _export_policy_or_empty(s3: Optional[S3]) -> AutoExportPolicy:
    if s3 is None or s3.auto_export_policy is None:
        return AutoExportPolicy()
    return s3.auto_export_policy


# =============================================================================
# Update predicates
# =============================================================================

def should_update_imported_file_chunk_size(new: Optional[int], old: Optional[int]) -> bool:
    return new != old


def should_update_s3_import_policy(new_s3: Optional[S3], old_s3: Optional[S3]) -> bool:
    """
    Compare auto-import policies, treating a missing S3 block or policy as empty.
    """
    return _import_policy_or_empty(new_s3) != _import_policy_or_empty(old_s3)


def should_update_s3_export_policy(new_s3: Optional[S3], old_s3: Optional[S3]) -> bool:
    """
    Compare auto-export policies, treating a missing S3 block or policy as empty.
    """
    return _export_policy_or_empty(new_s3) != _export_policy_or_empty(old_s3)


# =============================================================================
# Requests
# =============================================================================

def translate_to_create_request(
    model: ResourceModel,
    tag_set: Optional[TagSet],
    client_token: Optional[str],
) -> dict[str, Any]:
    request: dict[str, Any] = {
        "FileSystemId": model.file_system_id,
        "FileSystemPath": model.file_system_path,
        "DataRepositoryPath": model.data_repository_path,
    }
    if client_token:
        request["ClientRequestToken"] = client_token
    if model.batch_import_meta_data_on_create is not None:
        request["BatchImportMetaDataOnCreate"] = model.batch_import_meta_data_on_create
    if model.imported_file_chunk_size is not None:
        request["ImportedFileChunkSize"] = model.imported_file_chunk_size
    if tag_set is not None and not tag_set.is_empty():
        request["Tags"] = tags_to_sdk(merge_tag_set(tag_set))
    s3_config = s3_model_to_sdk(model.s3)
    if s3_config is not None:
        request["S3"] = s3_config
    return request


def translate_to_read_request(model: ResourceModel) -> dict[str, Any]:
    return {"association_ids": [model.association_id]}


def translate_to_delete_request(model: ResourceModel, client_token: Optional[str]) -> dict[str, Any]:
    request: dict[str, Any] = {
        "AssociationId": model.association_id,
        "DeleteDataInFileSystem": False,
    }
    if client_token:
        request["ClientRequestToken"] = client_token
    return request


def translate_to_update_imported_file_chunk_size(model: ResourceModel) -> dict[str, Any]:
    return {
        "AssociationId": model.association_id,
        "ImportedFileChunkSize": model.imported_file_chunk_size,
    }


def translate_to_update_s3_import_policy(model: ResourceModel) -> dict[str, Any]:
    """
    Build the request that sets only the auto-import policy.

    A desired state without an import policy, or without an S3 block at all,
    clears it with an empty event list.
    """
    policy = _import_policy_or_empty(model.s3)
    return {
        "AssociationId": model.association_id,
        "S3": {"AutoImportPolicy": {"Events": sorted(policy.events)}},
    }


def translate_to_update_s3_export_policy(model: ResourceModel) -> dict[str, Any]:
    """
    Build the request that sets only the auto-export policy.

    A desired state without an export policy, or without an S3 block at all,
    clears it with an empty event list.
    """
    policy = _export_policy_or_empty(model.s3)
    return {
        "AssociationId": model.association_id,
        "S3": {"AutoExportPolicy": {"Events": sorted(policy.events)}},
    }


def translate_to_tag_resource_request(
    association: dict[str, Any], added_tags: dict[str, str]
) -> dict[str, Any]:
    return {
        "ResourceARN": association.get("ResourceARN"),
        "Tags": [{"Key": key, "Value": value} for key, value in added_tags.items()],
    }


def translate_to_untag_resource_request(
    association: dict[str, Any], removed_tags: set[str]
) -> dict[str, Any]:
    return {
        "ResourceARN": association.get("ResourceARN"),
        "TagKeys": sorted(removed_tags),
    }


def translate_to_list_request(next_token: Optional[str]) -> dict[str, Any]:
    return {"next_token": next_token}


# =============================================================================
# Projections
# =============================================================================

def translate_from_association(association: dict[str, Any]) -> ResourceModel:
    return ResourceModel(
        association_id=association.get("AssociationId"),
        resource_arn=association.get("ResourceARN"),
        file_system_id=association.get("FileSystemId"),
        file_system_path=association.get("FileSystemPath"),
        data_repository_path=association.get("DataRepositoryPath"),
        batch_import_meta_data_on_create=association.get("BatchImportMetaDataOnCreate"),
        imported_file_chunk_size=association.get("ImportedFileChunkSize"),
        s3=s3_sdk_to_model(association),
        tags=tags_from_sdk(association.get("Tags")),
    )


def translate_from_read_response(
    response: Optional[dict[str, Any]], association_id: Optional[str]
) -> ResourceModel:
    """
    Project a describe response into the resource model.

    Raises:
        NotFoundError: When the response does not hold exactly one
            recognized association
    """
    association = association_from_describe(response)
    if association is None:
        raise NotFoundError.does_not_exist(association_id)
    return translate_from_association(association)


def translate_from_list_response(response: dict[str, Any]) -> list[ResourceModel]:
    """Project a describe page to models holding only the association id."""
    return [
        ResourceModel(association_id=association.get("AssociationId"))
        for association in response.get("Associations") or []
    ]
