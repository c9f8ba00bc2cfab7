# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Tag reconciliation for data repository associations.

Pure functions for merging the three tag tiers, validating tags against the
FSx tag format, and computing the tags to add and remove on update. Tags are
carried as ``list[Tag]`` on the model and as ``dict[str, str]`` when diffing;
conversion to the boto3 ``[{"Key": ..., "Value": ...}]`` shape happens only
at the client boundary.
"""

import logging
import re
import unicodedata
from typing import Iterable, Optional

from ..errors import InvalidTagFormatError
from ..models.progress import HandlerRequest
from ..models.resource import ResourceModel, Tag
from ..models.tags import TagSet

logger = logging.getLogger(__name__)

# Prefix of tags injected by the platform on the caller's behalf
SYSTEM_TAG_PREFIX = "aws:cloudformation"

# Reported in validation messages; matching is done by _is_allowed below
# because the stdlib re module has no \p{...} classes.
TAG_KEY_PATTERN = r"^(?!(?i)aws:)[\p{L}\p{Z}\p{N}_.:/=+\-@]*$"
TAG_VALUE_PATTERN = r"^[\p{L}\p{Z}\p{N}_.:/=+\-@]*$"

_RESERVED_KEY_PREFIX = re.compile(r"aws:", re.IGNORECASE)
_ALLOWED_SYMBOLS = frozenset("_.:/=+-@")
# Unicode general categories: Letter, Separator, Number
_ALLOWED_CATEGORIES = frozenset("LZN")


def _is_allowed(text: str) -> bool:
    return all(
        ch in _ALLOWED_SYMBOLS or unicodedata.category(ch)[0] in _ALLOWED_CATEGORIES
        for ch in text
    )


def is_valid_tag_key(key: str) -> bool:
    """Check a tag key: allowed characters only and no ``aws:`` prefix."""
    return not _RESERVED_KEY_PREFIX.match(key) and _is_allowed(key)


def is_valid_tag_value(value: Optional[str]) -> bool:
    return _is_allowed(value or "")


def merge_tag_set(tag_set: TagSet) -> list[Tag]:
    """
    Merge the three tag tiers into one list without duplicate keys.

    Resource tags are taken first, then stack tags, then system tags; a tag
    whose key was already seen is skipped, so resource tags win over stack
    tags and stack tags win over system tags.

    Args:
        tag_set: The three tag tiers

    Returns:
        Winning tags in first-seen order
    """
    merged: dict[str, Tag] = {}
    for tags in (tag_set.resource_tags, tag_set.stack_tags, tag_set.system_tags):
        for tag in tags:
            merged.setdefault(tag.key, tag)
    return list(merged.values())


def validate_tags(tags: Optional[Iterable[Tag]]) -> None:
    """
    Check each tag follows the FSx tag format.

    Stops at the first offending tag.

    Args:
        tags: Tags to validate, in the order they will be sent

    Raises:
        InvalidTagFormatError: With the 0-based index of the tag, whether the
            key or the value failed, and the pattern it failed
    """
    for index, tag in enumerate(tags or []):
        if not is_valid_tag_key(tag.key):
            raise InvalidTagFormatError(index, "key", tag.key, TAG_KEY_PATTERN)
        if not is_valid_tag_value(tag.value):
            raise InvalidTagFormatError(index, "value", tag.value or "", TAG_VALUE_PATTERN)


def non_system_tags(tags: Optional[Iterable[Tag]]) -> list[Tag]:
    """Drop tags the platform injected (``aws:cloudformation*`` keys)."""
    return [tag for tag in tags or [] if not tag.key.startswith(SYSTEM_TAG_PREFIX)]


def tags_to_add(previous: dict[str, str], desired: dict[str, str]) -> dict[str, str]:
    """Tags in ``desired`` that are new or whose value changed."""
    return {
        key: value
        for key, value in desired.items()
        if key not in previous or previous[key] != value
    }


def tags_to_remove(previous: dict[str, str], desired: dict[str, str]) -> set[str]:
    """Keys in ``previous`` no longer present in ``desired``."""
    return {key for key in previous if key not in desired}


def tags_to_map(tags: Optional[Iterable[Tag]]) -> dict[str, str]:
    """
    Convert model tags to a key/value map.

    Tags without a value are left out; on duplicate keys the last value wins.
    """
    return {tag.key: tag.value for tag in tags or [] if tag.value is not None}


def map_to_tags(tags: Optional[dict[str, str]]) -> list[Tag]:
    return [Tag(key=key, value=value) for key, value in (tags or {}).items()]


def tags_to_sdk(tags: Optional[Iterable[Tag]]) -> list[dict[str, str]]:
    """Convert model tags to the boto3 ``Tags`` parameter shape."""
    return [{"Key": tag.key, "Value": tag.value or ""} for tag in tags or []]


def tags_from_sdk(tags: Optional[Iterable[dict[str, str]]]) -> list[Tag]:
    return [Tag(key=tag["Key"], value=tag.get("Value")) for tag in tags or []]


def build_tag_set(request: HandlerRequest, model: ResourceModel) -> TagSet:
    """Assemble the three tag tiers sent on create."""
    return TagSet(
        resource_tags=list(model.tags or []),
        stack_tags=map_to_tags(request.desired_resource_tags),
        system_tags=map_to_tags(request.system_tags),
    )


def previously_attached_tags(request: HandlerRequest) -> dict[str, str]:
    """
    Tags applied by the previous operation.

    Stack-level tags overlaid with the tags embedded in the previous
    resource state; embedded tags win on key collision.
    """
    previous = dict(request.previous_resource_tags or {})
    if request.previous_resource_state is not None:
        previous.update(tags_to_map(request.previous_resource_state.tags))
    return previous


def desired_tags(request: HandlerRequest, model: Optional[ResourceModel]) -> dict[str, str]:
    """Stack-level tags overlaid with the tags embedded in ``model``."""
    desired = dict(request.desired_resource_tags or {})
    if model is not None:
        desired.update(tags_to_map(model.tags))
    return desired
