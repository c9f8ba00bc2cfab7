"""List handler: one page of association identifiers."""

import logging

from ..clients.fsx_client import FSxClient
from ..models.enums import OperationStatus
from ..models.progress import HandlerRequest, ProgressEvent
from ..services.error_classifier import handle_error
from ..services.translator import translate_from_list_response, translate_to_list_request

logger = logging.getLogger(__name__)


async def list_handler(client: FSxClient, request: HandlerRequest) -> ProgressEvent:
    """
    List data repository associations, one page per call.

    Only ``AssociationId`` is set on the returned models; a read is needed
    for the full description. The FSx pagination cursor is passed through
    unchanged.

    Args:
        client: FSx client
        request: Handler request; ``next_token`` selects the page

    Returns:
        SUCCESS with ``resource_models`` and ``next_token``, or FAILED
    """
    try:
        response = await client.describe_data_repository_associations(
            **translate_to_list_request(request.next_token)
        )
    except Exception as e:
        return handle_error(e)

    models = translate_from_list_response(response)
    logger.info(f"Listed {len(models)} data repository associations")

    return ProgressEvent(
        status=OperationStatus.SUCCESS,
        resource_models=models,
        next_token=response.get("NextToken"),
    )
