# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Create handler: create the association and wait for it to become available."""

import logging
from typing import Optional

from ..clients.fsx_client import FSxClient
from ..errors import HandlerFailure, InvalidRequestError
from ..models.context import CallbackContext
from ..models.progress import HandlerRequest, ProgressEvent
from ..models.resource import ResourceModel, TYPE_NAME
from ..services.lifecycle import (
    CREATE_AVAILABLE_LIFECYCLES,
    CREATE_FAILED_LIFECYCLES,
    is_stabilized,
)
from ..services.step_executor import Step, StepExecutor
from ..services.tagging import build_tag_set, validate_tags
from ..services.translator import translate_to_create_request, translate_to_read_request
from .base import CREATE_STEP, failure_event, read_resource, restore_identifier

logger = logging.getLogger(__name__)


async def create_handler(
    client: FSxClient,
    executor: StepExecutor,
    request: HandlerRequest,
    callback_context: Optional[CallbackContext] = None,
) -> ProgressEvent:
    """
    Create a data repository association.

    Validates the resource tags, merges resource, stack and system tags,
    issues the create call with the caller's idempotency token, waits for
    the AVAILABLE lifecycle (MISCONFIGURED and FAILED end the operation) and
    finishes with a read.

    Args:
        client: FSx client
        executor: Step executor
        request: Handler request carrying the desired state and tags
        callback_context: Context returned by the previous invocation, if any

    Returns:
        SUCCESS with the created model, IN_PROGRESS with a context to pass
        back, or FAILED
    """
    context = callback_context or CallbackContext()
    if request.desired_resource_state is None:
        return failure_event(InvalidRequestError("Desired resource state must be provided."))

    model = restore_identifier(request.desired_resource_state.model_copy(deep=True), context)

    try:
        validate_tags(model.tags)
    except HandlerFailure as e:
        return failure_event(e)

    tag_set = build_tag_set(request, model)

    async def create(model: ResourceModel, context: CallbackContext) -> dict:
        response = await client.create_data_repository_association(
            translate_to_create_request(model, tag_set, request.client_request_token)
        )
        association_id = response["Association"]["AssociationId"]
        # A replayed token returns the existing association; keep any id
        # already known for this operation.
        if not model.association_id:
            model.association_id = association_id
        logger.info(f"{TYPE_NAME} [{association_id}] successfully created.")
        return {"AssociationId": model.association_id}

    async def wait_until_available(model: ResourceModel, context: CallbackContext) -> bool:
        response = await client.describe_data_repository_associations(
            **translate_to_read_request(model)
        )
        return is_stabilized(
            response,
            model.association_id,
            CREATE_AVAILABLE_LIFECYCLES,
            CREATE_FAILED_LIFECYCLES,
        )

    steps = [Step(name=CREATE_STEP, invoke=create, stabilize=wait_until_available)]

    event = await executor.run(steps, model, context)
    if event is not None:
        return event

    return await read_resource(client, model)
