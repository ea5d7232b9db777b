"""Constants for the Google Drive v3 API."""

DRIVE_API_NAME = "drive"
DRIVE_API_VERSION = "v3"

# Read/write access limited to files created or opened by this app
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"

# Native editor types
GOOGLE_DOCS_MIME_TYPE = "application/vnd.google-apps.document"
GOOGLE_SHEETS_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
GOOGLE_SLIDES_MIME_TYPE = "application/vnd.google-apps.presentation"

TEXT_MIME_TYPE = "text/plain"
CSV_MIME_TYPE = "text/csv"
PDF_MIME_TYPE = "application/pdf"
JSON_MIME_TYPE = "application/json"

DEFAULT_MIME_TYPE = TEXT_MIME_TYPE

# Native editor documents cannot be downloaded directly, only exported
EXPORT_MIME_TYPES = {
    GOOGLE_DOCS_MIME_TYPE: TEXT_MIME_TYPE,
    GOOGLE_SHEETS_MIME_TYPE: CSV_MIME_TYPE,
    GOOGLE_SLIDES_MIME_TYPE: PDF_MIME_TYPE,
}

# Field selections
FILE_FIELDS = "id, name, mimeType, parents, size, createdTime, modifiedTime"
LIST_FIELDS = f"nextPageToken, files({FILE_FIELDS})"
ID_LIST_FIELDS = "nextPageToken, files(id)"
DEFAULT_PAGE_SIZE = 100
