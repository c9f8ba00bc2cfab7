"""Lifecycle classification of described associations."""

import logging
from typing import Any, Optional

from ..errors import NotStabilizedError
from ..models.enums import DataRepositoryLifecycle
from ..models.resource import TYPE_NAME

logger = logging.getLogger(__name__)

CREATE_AVAILABLE_LIFECYCLES = frozenset({DataRepositoryLifecycle.AVAILABLE})
CREATE_FAILED_LIFECYCLES = frozenset(
    {DataRepositoryLifecycle.MISCONFIGURED, DataRepositoryLifecycle.FAILED}
)

# A misconfigured association only needs re-syncing; an update that leaves it
# there has still been applied.
UPDATE_AVAILABLE_LIFECYCLES = frozenset(
    {DataRepositoryLifecycle.AVAILABLE, DataRepositoryLifecycle.MISCONFIGURED}
)
UPDATE_FAILED_LIFECYCLES = frozenset({DataRepositoryLifecycle.FAILED})


def lifecycle_of(association: dict[str, Any]) -> DataRepositoryLifecycle:
    return DataRepositoryLifecycle(association.get("Lifecycle"))


def association_from_describe(response: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """
    Extract the single association from a describe response.

    Returns None when there is no response, when zero or several associations
    came back, or when the lifecycle is not one this code recognizes.
    """
    if not response:
        return None
    associations = response.get("Associations") or []
    if len(associations) != 1:
        return None
    association = associations[0]
    if lifecycle_of(association) == DataRepositoryLifecycle.UNKNOWN_TO_SDK_VERSION:
        return None
    return association


def is_stabilized(
    response: Optional[dict[str, Any]],
    identifier: Optional[str],
    available: frozenset = CREATE_AVAILABLE_LIFECYCLES,
    failed: frozenset = CREATE_FAILED_LIFECYCLES,
) -> bool:
    """
    Decide whether a described association has settled.

    An association that cannot be observed (no response, no single match,
    unrecognized lifecycle) is treated as still pending.

    Args:
        response: Describe response for the association
        identifier: Association id, used in the failure
        available: Lifecycles that count as success
        failed: Lifecycles that end the operation

    Returns:
        True when the lifecycle is in ``available``, False to keep polling

    Raises:
        NotStabilizedError: When the lifecycle is in ``failed``
    """
    stabilized = False
    association = association_from_describe(response)
    if association is not None:
        lifecycle = lifecycle_of(association)
        if lifecycle in available:
            stabilized = True
        elif lifecycle in failed:
            failure_details = (association.get("FailureDetails") or {}).get("Message")
            logger.error(
                f"Data repository association ({association.get('AssociationId')}) for file system "
                f"({association.get('FileSystemId')}) is in a failed state [{lifecycle.value}] "
                f"with failure message: {failure_details}"
            )
            raise NotStabilizedError(identifier, failure_details)

    logger.info(f"{TYPE_NAME} [{identifier}] has stabilized: {stabilized}")
    return stabilized
