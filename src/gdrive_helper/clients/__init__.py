"""Google API clients."""

from . import drive

__all__ = [
    "drive",
]
