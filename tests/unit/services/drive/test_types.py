import pytest
from datetime import timezone

from gdrive_helper.services.drive.types import DriveFile


@pytest.mark.unit
class TestDriveFile:
    """Test cases for the DriveFile dataclass."""

    def test_from_api(self):
        drive_file = DriveFile.from_api({
            "id": "abc",
            "name": "report.csv",
            "mimeType": "text/csv",
            "parents": ["folder-1"],
            "size": "42",
            "createdTime": "2025-01-15T10:00:00.000Z",
        })

        assert drive_file.file_id == "abc"
        assert drive_file.name == "report.csv"
        assert drive_file.parents == ["folder-1"]
        assert drive_file.size == 42
        assert drive_file.created_time.astimezone(timezone.utc).hour == 10
        assert drive_file.modified_time is None

    def test_from_api_tolerates_bad_values(self):
        drive_file = DriveFile.from_api({"id": "abc", "size": "lots", "modifiedTime": "yesterday"})

        assert drive_file.size is None
        assert drive_file.modified_time is None
        assert drive_file.parents == []

    @pytest.mark.parametrize("mime_type,export_type", [
        ("application/vnd.google-apps.document", "text/plain"),
        ("application/vnd.google-apps.spreadsheet", "text/csv"),
        ("application/vnd.google-apps.presentation", "application/pdf"),
        ("application/json", None),
        ("text/plain", None),
    ])
    def test_export_mime_type(self, mime_type, export_type):
        drive_file = DriveFile(mime_type=mime_type)
        assert drive_file.export_mime_type() == export_type
        assert drive_file.is_native_document() == (export_type is not None)

    def test_to_dict(self):
        drive_file = DriveFile(file_id="abc", name="a.txt", mime_type="text/plain", parents=["f"])
        assert drive_file.to_dict() == {
            "id": "abc", "name": "a.txt", "mimeType": "text/plain", "parents": ["f"]
        }
