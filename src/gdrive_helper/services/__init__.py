"""Google API services used by the helper."""

from . import drive

__all__ = [
    "drive",
]
