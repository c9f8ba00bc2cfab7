"""Handlers for the data repository association lifecycle operations."""

from .create_handler import create_handler
from .read_handler import read_handler
from .update_handler import update_handler, validate_properties_are_updatable
from .delete_handler import delete_handler
from .list_handler import list_handler

__all__ = [
    "create_handler",
    "read_handler",
    "update_handler",
    "validate_properties_are_updatable",
    "delete_handler",
    "list_handler",
]
