"""FSx client wrapper module."""

from .fsx_client import FSxClient, FSxAPIError

__all__ = ["FSxClient", "FSxAPIError"]
