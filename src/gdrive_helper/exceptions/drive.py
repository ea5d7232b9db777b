from typing import Optional

from .base import APIError


class RemoteFailureError(APIError):
    """
    Raised when the Drive API answers with a non-success status.
    Args:
        status: HTTP status code, if one was received.
        reason: Status text or error message reported by the server.
    """

    def __init__(self, status: Optional[int], reason: str):
        self.status = status
        self.reason = reason
        if status is not None:
            super().__init__(f"Drive API request failed ({status}): {reason}")
        else:
            super().__init__(f"Drive API request failed: {reason}")


class DriveError(APIError):
    """Base exception for Drive lookup errors."""
    pass


class DriveFileNotFoundError(DriveError):
    """Raised when a folder/name lookup matches no file."""

    def __init__(self, folder_id: str, file_name: Optional[str] = None):
        self.folder_id = folder_id
        self.file_name = file_name
        if file_name is None:
            super().__init__(f"No files found in folder {folder_id}")
        else:
            super().__init__(f"File not found: {file_name!r} in folder {folder_id}")


class AmbiguousFileError(DriveError):
    """Raised when a folder/name lookup matches more than one file."""

    def __init__(self, folder_id: str, file_name: str, file_ids: list):
        self.folder_id = folder_id
        self.file_name = file_name
        self.file_ids = list(file_ids)
        super().__init__(
            f"Multiple files named {file_name!r} in folder {folder_id} ({len(self.file_ids)} matches)"
        )
