# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Delete handler: delete the association and wait until it is gone."""

import logging
from typing import Optional

from ..clients.fsx_client import FSxClient
from ..errors import NotFoundError
from ..models.context import CallbackContext
from ..models.progress import HandlerRequest, ProgressEvent
from ..models.resource import ResourceModel, TYPE_NAME
from ..services.error_classifier import NOT_FOUND_EXCEPTIONS
from ..services.step_executor import Step, StepExecutor
from ..services.translator import translate_to_delete_request, translate_to_read_request
from .base import failure_event

logger = logging.getLogger(__name__)

PRE_DELETION_CHECK_STEP = "PreDeletionCheck"
DELETE_STEP = "Delete"


async def delete_handler(
    client: FSxClient,
    executor: StepExecutor,
    request: HandlerRequest,
    callback_context: Optional[CallbackContext] = None,
) -> ProgressEvent:
    """
    Delete a data repository association.

    Data in the file system is kept (``DeleteDataInFileSystem=False``). An
    association that is already gone is a success without a delete call.

    Args:
        client: FSx client
        executor: Step executor
        request: Handler request; the desired state must carry the id
        callback_context: Context returned by the previous invocation, if any

    Returns:
        SUCCESS without a model, IN_PROGRESS, or FAILED
    """
    context = callback_context or CallbackContext()
    desired = request.desired_resource_state
    if desired is None or not desired.association_id:
        return failure_event(NotFoundError.missing_identifier())

    model = desired.model_copy(deep=True)

    async def associations(model: ResourceModel) -> list:
        response = await client.describe_data_repository_associations(
            **translate_to_read_request(model)
        )
        return (response or {}).get("Associations") or []

    async def pre_deletion_check(model: ResourceModel, context: CallbackContext):
        try:
            found = await associations(model)
        except NOT_FOUND_EXCEPTIONS:
            found = []
        if not found:
            logger.info(f"{TYPE_NAME} [{model.association_id}] already deleted.")
            return ProgressEvent.success(None)
        return None

    async def delete(model: ResourceModel, context: CallbackContext) -> dict:
        try:
            await client.delete_data_repository_association(
                translate_to_delete_request(model, request.client_request_token)
            )
        except NOT_FOUND_EXCEPTIONS:
            # Gone between the check and the call; stabilization confirms it
            logger.info(f"{TYPE_NAME} [{model.association_id}] disappeared before delete.")
            return {}
        logger.info(f"{TYPE_NAME} [{model.association_id}] successfully deleted.")
        return {}

    async def wait_until_gone(model: ResourceModel, context: CallbackContext) -> bool:
        try:
            stabilized = not await associations(model)
        except NOT_FOUND_EXCEPTIONS:
            stabilized = True
        logger.info(f"{TYPE_NAME} {model.primary_identifier} deletion has stabilized: {stabilized}")
        return stabilized

    steps = [
        Step(name=PRE_DELETION_CHECK_STEP, invoke=pre_deletion_check),
        Step(name=DELETE_STEP, invoke=delete, stabilize=wait_until_gone),
    ]

    event = await executor.run(steps, model, context)
    if event is not None:
        return event

    return ProgressEvent.success(None)
