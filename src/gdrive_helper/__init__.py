"""
Async helper for Google Drive: OAuth consent through an identity provider,
then file create/read/move/delete in Drive folders.
"""

from .clients.drive import AsyncDriveClient, create_client
from .config import DriveClientConfig
from .services.drive import DriveFile

__all__ = [
    "AsyncDriveClient",
    "create_client",
    "DriveClientConfig",
    "DriveFile",
]
