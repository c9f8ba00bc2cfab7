"""Read handler: describe one association and project it."""

import logging
from typing import Optional

from ..clients.fsx_client import FSxClient
from ..errors import NotFoundError
from ..models.context import CallbackContext
from ..models.progress import HandlerRequest, ProgressEvent
from .base import failure_event, read_resource

logger = logging.getLogger(__name__)


async def read_handler(
    client: FSxClient,
    request: HandlerRequest,
    callback_context: Optional[CallbackContext] = None,
) -> ProgressEvent:
    """
    Read a data repository association.

    Exactly one association with a recognized lifecycle is a success; no
    match, several matches, or an unrecognized lifecycle fail with NotFound.

    Args:
        client: FSx client
        request: Handler request; ``desired_resource_state.association_id``
            identifies the association
        callback_context: Unused, read completes in one invocation

    Returns:
        SUCCESS with the projected model, or FAILED
    """
    model = request.desired_resource_state
    if model is None or not model.association_id:
        return failure_event(NotFoundError.missing_identifier())

    logger.info(f"Reading data repository association {model.association_id}")
    return await read_resource(client, model)
