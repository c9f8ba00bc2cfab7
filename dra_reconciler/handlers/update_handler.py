# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Update handler: apply property and tag changes one at a time.

FSx cannot apply a second change while the association is still
transitioning from the first, so each property is updated in its own call
and the association must stabilize before the next step starts:

1. PreUpdateCheck - the association must exist
2. ChunkSize      - ImportedFileChunkSize
3. S3AutoImport   - S3.AutoImportPolicy
4. S3AutoExport   - S3.AutoExportPolicy
5. RemoveTags     - untag keys no longer desired
6. AddTags        - tag new or changed keys
7. read back

Steps 2-6 run only when the desired state differs from the previous one,
and check the freshly described association again before sending anything,
so a resumed or repeated update makes no redundant calls.
"""

import logging
from typing import Any, Optional

from ..clients.fsx_client import FSxClient
from ..errors import HandlerFailure, NotFoundError, NotUpdatableError
from ..models.context import CallbackContext
from ..models.progress import HandlerRequest, ProgressEvent
from ..models.resource import IMMUTABLE_FIELDS, ResourceModel, TYPE_NAME
from ..services.lifecycle import (
    UPDATE_AVAILABLE_LIFECYCLES,
    UPDATE_FAILED_LIFECYCLES,
    association_from_describe,
    is_stabilized,
)
from ..services.step_executor import Step, StepExecutor
from ..services.tagging import (
    desired_tags,
    map_to_tags,
    non_system_tags,
    previously_attached_tags,
    tags_from_sdk,
    tags_to_add,
    tags_to_map,
    tags_to_remove,
    validate_tags,
)
from ..services.translator import (
    s3_sdk_to_model,
    should_update_imported_file_chunk_size,
    should_update_s3_export_policy,
    should_update_s3_import_policy,
    translate_to_read_request,
    translate_to_tag_resource_request,
    translate_to_untag_resource_request,
    translate_to_update_imported_file_chunk_size,
    translate_to_update_s3_export_policy,
    translate_to_update_s3_import_policy,
)
from .base import describe_or_raise_not_found, failure_event, read_resource

logger = logging.getLogger(__name__)

PRE_UPDATE_CHECK_STEP = "PreUpdateCheck"
CHUNK_SIZE_STEP = "ChunkSize"
S3_AUTO_IMPORT_STEP = "S3AutoImport"
S3_AUTO_EXPORT_STEP = "S3AutoExport"
REMOVE_TAGS_STEP = "RemoveTags"
ADD_TAGS_STEP = "AddTags"


def validate_properties_are_updatable(new_model: ResourceModel, prev_model: ResourceModel) -> None:
    """
    Make sure no create-only property changes.

    A property is checked once the previous state has a value for it. The
    first violation, in ``IMMUTABLE_FIELDS`` order, is reported.

    Raises:
        NotUpdatableError: Naming the first changed property
    """
    for name in IMMUTABLE_FIELDS:
        previous = getattr(prev_model, name)
        if previous is None or previous == "":
            continue
        if getattr(new_model, name) != previous:
            raise NotUpdatableError(ResourceModel.model_fields[name].alias)


async def update_handler(
    client: FSxClient,
    executor: StepExecutor,
    request: HandlerRequest,
    callback_context: Optional[CallbackContext] = None,
) -> ProgressEvent:
    """
    Update a data repository association.

    Args:
        client: FSx client
        executor: Step executor
        request: Handler request with the desired and previous states and
            the stack-level tags of both
        callback_context: Context returned by the previous invocation, if any

    Returns:
        SUCCESS with the updated model, IN_PROGRESS, or FAILED
    """
    context = callback_context or CallbackContext()
    if request.desired_resource_state is None:
        return failure_event(NotFoundError.missing_identifier())

    new_model = request.desired_resource_state.model_copy(deep=True)
    old_model = request.previous_resource_state or request.desired_resource_state

    previous_tags = previously_attached_tags(request)
    wanted_tags = desired_tags(request, request.desired_resource_state)
    removed_keys = tags_to_remove(previous_tags, wanted_tags)
    added_tags = tags_to_add(previous_tags, wanted_tags)

    try:
        validate_properties_are_updatable(new_model, old_model)
        if not new_model.association_id or not old_model.association_id:
            raise NotFoundError.missing_identifier()
        validate_tags(non_system_tags(map_to_tags(added_tags)))
    except HandlerFailure as e:
        return failure_event(e)

    async def observed_association(model: ResourceModel) -> dict[str, Any]:
        response = await client.describe_data_repository_associations(
            **translate_to_read_request(model)
        )
        association = association_from_describe(response)
        if association is None:
            raise NotFoundError.does_not_exist(model.association_id)
        return association

    async def wait_until_available(model: ResourceModel, context: CallbackContext) -> bool:
        response = await client.describe_data_repository_associations(
            **translate_to_read_request(model)
        )
        return is_stabilized(
            response,
            model.association_id,
            UPDATE_AVAILABLE_LIFECYCLES,
            UPDATE_FAILED_LIFECYCLES,
        )

    async def pre_update_check(model: ResourceModel, context: CallbackContext) -> None:
        await describe_or_raise_not_found(client, model)

    async def update_chunk_size(model: ResourceModel, context: CallbackContext):
        association = await observed_association(model)
        if not should_update_imported_file_chunk_size(
            association.get("ImportedFileChunkSize"), model.imported_file_chunk_size
        ):
            logger.info(f"{TYPE_NAME} [{model.association_id}] 'ImportedFileChunkSize' already up to date.")
            return None
        await client.update_data_repository_association(
            translate_to_update_imported_file_chunk_size(model)
        )
        logger.info(
            f"{TYPE_NAME} [{model.association_id}], property 'ImportedFileChunkSize' "
            "has successfully been updated."
        )
        return {}

    async def update_auto_import(model: ResourceModel, context: CallbackContext):
        association = await observed_association(model)
        if not should_update_s3_import_policy(s3_sdk_to_model(association), model.s3):
            logger.info(f"{TYPE_NAME} [{model.association_id}] 'AutoImportPolicy' already up to date.")
            return None
        await client.update_data_repository_association(
            translate_to_update_s3_import_policy(model)
        )
        logger.info(
            f"{TYPE_NAME} [{model.association_id}], property 'AutoImportPolicy' "
            "has successfully been updated."
        )
        return {}

    async def update_auto_export(model: ResourceModel, context: CallbackContext):
        association = await observed_association(model)
        if not should_update_s3_export_policy(s3_sdk_to_model(association), model.s3):
            logger.info(f"{TYPE_NAME} [{model.association_id}] 'AutoExportPolicy' already up to date.")
            return None
        update_request = translate_to_update_s3_export_policy(model)
        logger.debug(f"{TYPE_NAME} [{model.association_id}] export configuration: {update_request.get('S3')}")
        await client.update_data_repository_association(update_request)
        logger.info(
            f"{TYPE_NAME} [{model.association_id}], property 'AutoExportPolicy' "
            "has successfully been updated."
        )
        return {}

    async def remove_tags(model: ResourceModel, context: CallbackContext):
        association = await observed_association(model)
        keys = set(removed_keys)
        if association.get("Tags") is not None:
            keys &= set(tags_to_map(tags_from_sdk(association["Tags"])))
        if not keys:
            logger.info(f"{TYPE_NAME} [{model.association_id}] old tags already removed.")
            return None
        await client.untag_resource(translate_to_untag_resource_request(association, keys))
        logger.info(f"{TYPE_NAME} [{model.association_id}], updated to remove old tags.")
        return {}

    async def add_tags(model: ResourceModel, context: CallbackContext):
        association = await observed_association(model)
        tags = dict(added_tags)
        if association.get("Tags") is not None:
            observed = tags_to_map(tags_from_sdk(association["Tags"]))
            tags = tags_to_add(observed, tags)
        if not tags:
            logger.info(f"{TYPE_NAME} [{model.association_id}] new tags already present.")
            return None
        await client.tag_resource(translate_to_tag_resource_request(association, tags))
        logger.info(f"{TYPE_NAME} [{model.association_id}], updated to add new tags.")
        return {}

    steps = [
        Step(name=PRE_UPDATE_CHECK_STEP, invoke=pre_update_check),
        Step(
            name=CHUNK_SIZE_STEP,
            should_apply=lambda model, context: should_update_imported_file_chunk_size(
                new_model.imported_file_chunk_size, old_model.imported_file_chunk_size
            ),
            invoke=update_chunk_size,
            stabilize=wait_until_available,
        ),
        Step(
            name=S3_AUTO_IMPORT_STEP,
            should_apply=lambda model, context: should_update_s3_import_policy(
                new_model.s3, old_model.s3
            ),
            invoke=update_auto_import,
            stabilize=wait_until_available,
        ),
        Step(
            name=S3_AUTO_EXPORT_STEP,
            should_apply=lambda model, context: should_update_s3_export_policy(
                new_model.s3, old_model.s3
            ),
            invoke=update_auto_export,
            stabilize=wait_until_available,
        ),
        Step(
            name=REMOVE_TAGS_STEP,
            should_apply=lambda model, context: bool(removed_keys),
            invoke=remove_tags,
        ),
        Step(
            name=ADD_TAGS_STEP,
            should_apply=lambda model, context: bool(added_tags),
            invoke=add_tags,
        ),
    ]

    event = await executor.run(steps, new_model, context)
    if event is not None:
        return event

    return await read_resource(client, new_model)
