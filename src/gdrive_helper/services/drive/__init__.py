"""Drive API types and helpers."""

from .types import DriveFile
from .utils import build_parent_query, escape_query_value
from . import constants

__all__ = [
    "DriveFile",
    "build_parent_query",
    "escape_query_value",
    "constants",
]
