"""Google Drive API client."""

from .async_client import AsyncDriveClient, async_drive_service, create_client

__all__ = [
    "AsyncDriveClient",
    "async_drive_service",
    "create_client",
]
