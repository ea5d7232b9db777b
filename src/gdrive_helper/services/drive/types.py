from datetime import datetime
from typing import Optional, List
from dataclasses import dataclass, field
import logging

from .constants import EXPORT_MIME_TYPES
from ...utils.datetime import parse_rfc3339

logger = logging.getLogger(__name__)


@dataclass
class DriveFile:
    """
    Represents a file or folder in Google Drive.
    Args:
        file_id: The unique identifier for the file.
        name: The name of the file.
        mime_type: The MIME type of the file.
        parents: List of parent folder IDs.
        size: The size of the file in bytes (None for folders and native documents).
        created_time: When the file was created, in the local timezone.
        modified_time: When the file was last modified, in the local timezone.
    """
    file_id: Optional[str] = None
    name: Optional[str] = None
    mime_type: Optional[str] = None
    parents: List[str] = field(default_factory=list)
    size: Optional[int] = None
    created_time: Optional[datetime] = None
    modified_time: Optional[datetime] = None

    @staticmethod
    def from_api(google_file: dict) -> "DriveFile":
        """
        Creates a DriveFile instance from a Drive API file resource.
        Args:
            google_file: A dictionary containing file data from the Drive API.
        Returns:
            A DriveFile instance populated with the data from the dictionary.
        """
        size = None
        if google_file.get("size") is not None:
            try:
                size = int(google_file["size"])
            except (TypeError, ValueError):
                logger.warning("Failed to parse file size: %s", google_file.get("size"))

        return DriveFile(
            file_id=google_file.get("id"),
            name=google_file.get("name"),
            mime_type=google_file.get("mimeType"),
            parents=list(google_file.get("parents", [])),
            size=size,
            created_time=parse_rfc3339(google_file.get("createdTime")),
            modified_time=parse_rfc3339(google_file.get("modifiedTime")),
        )

    def is_native_document(self) -> bool:
        """
        Check if this file is a native editor document that must be exported.
        Returns:
            True for Docs, Sheets and Slides files.
        """
        return self.mime_type in EXPORT_MIME_TYPES

    def export_mime_type(self) -> Optional[str]:
        """The format this file is exported to, or None if it downloads directly."""
        return EXPORT_MIME_TYPES.get(self.mime_type)

    def to_dict(self) -> dict:
        """
        Converts the DriveFile instance to a dictionary representation.
        Returns:
            A dictionary containing the file data in Drive API field names.
        """
        result = {}
        if self.file_id:
            result["id"] = self.file_id
        if self.name:
            result["name"] = self.name
        if self.mime_type:
            result["mimeType"] = self.mime_type
        if self.parents:
            result["parents"] = list(self.parents)
        if self.size is not None:
            result["size"] = str(self.size)
        if self.created_time:
            result["createdTime"] = self.created_time.isoformat()
        if self.modified_time:
            result["modifiedTime"] = self.modified_time.isoformat()
        return result

    def __str__(self):
        return f"{self.name} ({self.mime_type})"

    def __repr__(self):
        return f"DriveFile(id={self.file_id!r}, name={self.name!r}, mime_type={self.mime_type!r})"
