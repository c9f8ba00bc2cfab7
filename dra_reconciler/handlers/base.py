"""Helpers shared by the handlers."""

import logging
from typing import Any

from ..clients.fsx_client import FSxClient
from ..errors import HandlerFailure, NotFoundError
from ..models.context import CallbackContext
from ..models.progress import ProgressEvent
from ..models.resource import ResourceModel, TYPE_NAME
from ..services.error_classifier import handle_error
from ..services.translator import translate_from_read_response, translate_to_read_request

logger = logging.getLogger(__name__)

CREATE_STEP = "Create"


def failure_event(failure: HandlerFailure) -> ProgressEvent:
    logger.error(f"{TYPE_NAME} operation failed: {failure.message}")
    return ProgressEvent.failed(failure.error_code, failure.message)


def restore_identifier(model: ResourceModel, context: CallbackContext) -> ResourceModel:
    """
    Fill in the association id learned by an earlier invocation.

    The caller re-sends the desired state, which does not know the id that
    create returned; an id already on the model is never replaced.
    """
    if not model.association_id:
        created = context.results.get(CREATE_STEP) or {}
        if created.get("AssociationId"):
            model.association_id = created["AssociationId"]
    return model


async def describe_or_raise_not_found(client: FSxClient, model: ResourceModel) -> dict[str, Any]:
    """
    Describe the association and fail when nothing comes back.

    Raises:
        NotFoundError: When the response holds no association
    """
    response = await client.describe_data_repository_associations(
        **translate_to_read_request(model)
    )
    associations = (response or {}).get("Associations") or []
    if not associations:
        raise NotFoundError.does_not_exist(model.association_id)

    logger.info(f"{TYPE_NAME} [{associations[0].get('AssociationId')}] successfully read.")
    return response


async def read_resource(client: FSxClient, model: ResourceModel) -> ProgressEvent:
    """
    Describe the association and project it into a fresh resource model.

    This is the last step of every create, update and read.
    """
    if not model.association_id:
        return failure_event(NotFoundError.missing_identifier())

    try:
        response = await client.describe_data_repository_associations(
            **translate_to_read_request(model)
        )
        resource = translate_from_read_response(response, model.association_id)
    except HandlerFailure as e:
        return failure_event(e)
    except Exception as e:
        return handle_error(e)

    logger.info(f"{TYPE_NAME} [{resource.association_id}] has successfully been read.")
    return ProgressEvent.success(resource)
