# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Data repository association resource model.

Field aliases follow the resource schema used by the host
(``AssociationId``, ``S3.AutoImportPolicy.Events``, ...), so models can be
loaded from and dumped to the host payload with ``by_alias=True``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TYPE_NAME = "AWS::FSx::DataRepositoryAssociation"

# Fields fixed at creation, in the order they are checked on update.
IMMUTABLE_FIELDS = (
    "resource_arn",
    "file_system_id",
    "file_system_path",
    "data_repository_path",
    "batch_import_meta_data_on_create",
)


class Tag(BaseModel):
    """A key/value tag attached to the association."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    key: str = Field(..., alias="Key")
    value: Optional[str] = Field(None, alias="Value")


class _EventPolicy(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    events: set[str] = Field(default_factory=set, alias="Events")

    @field_validator("events", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return set() if v is None else v


class AutoImportPolicy(_EventPolicy):
    """S3 events (NEW, CHANGED, DELETED) imported into the file system."""


class AutoExportPolicy(_EventPolicy):
    """File system events (NEW, CHANGED, DELETED) exported to S3."""


class S3(BaseModel):
    """S3 data repository configuration of the association."""

    model_config = ConfigDict(populate_by_name=True)

    auto_import_policy: Optional[AutoImportPolicy] = Field(None, alias="AutoImportPolicy")
    auto_export_policy: Optional[AutoExportPolicy] = Field(None, alias="AutoExportPolicy")


class ResourceModel(BaseModel):
    """Canonical description of one data repository association."""

    model_config = ConfigDict(populate_by_name=True)

    association_id: Optional[str] = Field(None, alias="AssociationId")
    resource_arn: Optional[str] = Field(None, alias="ResourceARN")
    file_system_id: Optional[str] = Field(None, alias="FileSystemId")
    file_system_path: Optional[str] = Field(None, alias="FileSystemPath")
    data_repository_path: Optional[str] = Field(None, alias="DataRepositoryPath")
    batch_import_meta_data_on_create: Optional[bool] = Field(
        None, alias="BatchImportMetaDataOnCreate"
    )
    imported_file_chunk_size: Optional[int] = Field(None, alias="ImportedFileChunkSize")
    s3: Optional[S3] = Field(None, alias="S3")
    tags: Optional[list[Tag]] = Field(None, alias="Tags")

    @property
    def primary_identifier(self) -> dict[str, Optional[str]]:
        return {"AssociationId": self.association_id}

    def to_payload(self) -> dict:
        """Dump the model in the host resource schema, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
