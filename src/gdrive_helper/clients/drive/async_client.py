"""
Async Google Drive client.

Every operation opens an aiogoogle session against the Drive v3 API using the
client's current access token. Name lookups are not cached; each one costs a
search request.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional, List, Union, Any

from aiogoogle import Aiogoogle
from aiogoogle.auth.creds import UserCreds
from aiogoogle.excs import AuthError, HTTPError

from ...auth.manager import AuthManager
from ...auth.provider import IdentityProvider, GoogleIdentityProvider
from ...config import DriveClientConfig
from ...exceptions import (
    AmbiguousFileError,
    DriveFileNotFoundError,
    RemoteFailureError,
)
from ...services.drive.constants import (
    DRIVE_API_NAME,
    DRIVE_API_VERSION,
    DEFAULT_MIME_TYPE,
    DEFAULT_PAGE_SIZE,
    FILE_FIELDS,
    ID_LIST_FIELDS,
    JSON_MIME_TYPE,
    LIST_FIELDS,
    PDF_MIME_TYPE,
)
from ...services.drive.types import DriveFile
from ...services.drive.utils import build_parent_query, validate_file_name, validate_folder_id
from ...utils.log_sanitizer import (
    sanitize_file_id,
    sanitize_filename,
    sanitize_for_logging,
    sanitize_query,
)

logger = logging.getLogger(__name__)

Content = Union[str, bytes]


def _remote_failure(error: HTTPError) -> RemoteFailureError:
    res = getattr(error, "res", None)
    status = getattr(res, "status_code", None)
    reason = getattr(res, "reason", None) or str(error)
    return RemoteFailureError(status, reason)


@asynccontextmanager
async def async_drive_service(user_creds: UserCreds):
    """Async context manager for Drive service connections with error handling."""
    try:
        async with Aiogoogle(user_creds=user_creds) as aiogoogle:
            drive_v3 = await aiogoogle.discover(DRIVE_API_NAME, DRIVE_API_VERSION)
            yield aiogoogle, drive_v3
    except HTTPError as e:
        logger.error("Drive API error: %s", e)
        raise _remote_failure(e) from e
    except AuthError as e:
        logger.error("Drive API rejected credentials: %s", e)
        raise RemoteFailureError(401, str(e)) from e


def _normalize_content(content: Any, binary: bool = False) -> Content:
    """
    Turns a raw response body into file content.
    Args:
        content: The raw response body (res.data).
        binary: Keep bytes as bytes even when they decode as UTF-8.
    Returns:
        str for text content, bytes for binary content.
    """
    if content is None:
        return b"" if binary else ""
    if isinstance(content, (bytes, bytearray)):
        if binary:
            return bytes(content)
        try:
            return bytes(content).decode("utf-8")
        except UnicodeDecodeError:
            return bytes(content)
    if isinstance(content, str):
        return content
    return str(content)


def _media_content(res, mime_type: Optional[str], binary: bool = False) -> Content:
    """
    Turns a full media response into raw file content.

    aiogoogle parses JSON bodies into res.json and leaves res.data empty, so
    falsy JSON values ({}, [], 0, false, null) and bare strings are only
    recoverable from res.json.
    Args:
        res: The aiogoogle Response from as_user(..., full_res=True).
        mime_type: The MIME type the body was served as.
        binary: Keep bytes as bytes even when they decode as UTF-8.
    Returns:
        str for text content, bytes for binary content.
    """
    if res.json is not None:
        return json.dumps(res.json)
    if res.data is None and mime_type == JSON_MIME_TYPE:
        # A JSON body that parsed to null
        return "null"
    return _normalize_content(res.data, binary)


class AsyncDriveClient:
    """
    Google Drive client bound to one OAuth identity.

    Usage:
        client = create_client()
        await client.init(CLIENT_ID)
        await client.authenticate()
        await client.create_json_file(FOLDER_ID, "example.json", {"message": "Hello, world!"})
    """

    def __init__(self, provider: IdentityProvider, config: Optional[DriveClientConfig] = None):
        self.config = config or DriveClientConfig()
        self.auth = AuthManager(provider, poll_interval=self.config.poll_interval)

    @property
    def client_id(self) -> Optional[str]:
        return self.auth.client_id

    @property
    def access_token(self) -> Optional[str]:
        return self.auth.access_token

    @property
    def provider_ready(self) -> bool:
        return self.auth.provider_ready

    async def init(self, client_id: Optional[str] = None, timeout: Optional[float] = None) -> None:
        """
        Waits for the identity provider and prepares the token client.
        Args:
            client_id: OAuth client identifier; defaults to the configured one.
            timeout: Seconds to wait for the provider; defaults to the configured timeout.
        Raises:
            ProviderUnavailableError: The provider did not become available in time.
            ValidationError: The client-secrets file belongs to another client id.
        """
        client_id = client_id or self.config.client_id
        if timeout is None:
            timeout = self.config.provider_timeout
        await self.auth.init(client_id, timeout)

    async def authenticate(self, timeout: Optional[float] = None) -> str:
        """
        Requests an access token and returns once it has been received.
        Raises:
            UninitializedError: init() has not been called.
            AuthenticationError: Consent failed or timed out.
        """
        return await self.auth.authenticate(timeout)

    def set_access_token(self, access_token: str) -> None:
        """Use an access token obtained elsewhere, skipping the consent flow."""
        self.auth.set_access_token(access_token)

    @asynccontextmanager
    async def _service(self):
        async with async_drive_service(self.auth.user_creds()) as (aiogoogle, drive):
            yield aiogoogle, drive

    async def _list_files(self, aiogoogle, drive, query: str, fields: str) -> List[dict]:
        files = []
        page_token = None
        while True:
            params = {"q": query, "fields": fields, "pageSize": DEFAULT_PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            result = await aiogoogle.as_user(drive.files.list(**params))
            files.extend(result.get("files", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                return files

    async def _resolve_file_id(self, aiogoogle, drive, folder_id: str, file_name: Optional[str]) -> str:
        query = build_parent_query(folder_id, file_name)
        logger.info("Searching Drive: %s", sanitize_query(query))
        result = await aiogoogle.as_user(drive.files.list(q=query, fields="files(id)"))
        files = result.get("files", [])
        if not files:
            raise DriveFileNotFoundError(folder_id, file_name)
        return files[0]["id"]

    async def resolve_file_id(self, folder_id: str, file_name: Optional[str] = None) -> str:
        """
        Looks up a file by folder and optional name.
        Args:
            folder_id: Folder to search in.
            file_name: Exact file name; when omitted any child of the folder matches.
        Returns:
            The ID of the first match.
        Raises:
            DriveFileNotFoundError: Nothing matched.
        """
        async with self._service() as (aiogoogle, drive):
            return await self._resolve_file_id(aiogoogle, drive, folder_id, file_name)

    async def create_file(
        self,
        folder_id: str,
        file_name: str,
        content: Content,
        mime_type: str = DEFAULT_MIME_TYPE,
    ) -> DriveFile:
        """
        Uploads a new file into a folder as a multipart request.

        No existence check is made, so creating the same name twice yields
        two files with distinct IDs.
        Args:
            folder_id: Parent folder ID.
            file_name: Name of the new file.
            content: Text (encoded as UTF-8) or bytes.
            mime_type: MIME type stored with the file.
        Returns:
            The created file.
        """
        validate_folder_id(folder_id)
        validate_file_name(file_name)
        metadata = {
            "name": file_name,
            "parents": [folder_id],
            "mimeType": mime_type,
        }
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)

        logger.info("Creating %s (%s, %d bytes) in folder %s",
                    sanitize_filename(file_name), mime_type, len(data), sanitize_file_id(folder_id))
        async with self._service() as (aiogoogle, drive):
            try:
                request = drive.files.create(upload_file=data, json=metadata, fields=FILE_FIELDS)
                # Media part carries the file's own type
                request.upload_file_content_type = mime_type
                created = await aiogoogle.as_user(request)
            except Exception as e:
                logger.error("Error creating file: %s", e)
                raise
        logger.info("File created with ID: %s", sanitize_file_id(created.get("id")))
        return DriveFile.from_api(created)

    async def create_json_file(self, folder_id: str, file_name: str, obj: Any) -> DriveFile:
        """Serializes obj to JSON and stores it as an application/json file."""
        return await self.create_file(folder_id, file_name, json.dumps(obj), JSON_MIME_TYPE)

    async def _get_metadata(self, aiogoogle, drive, file_id: str, fields: str) -> DriveFile:
        result = await aiogoogle.as_user(drive.files.get(fileId=file_id, fields=fields))
        return DriveFile.from_api(result)

    async def get_file_metadata(self, file_id: str, fields: str = FILE_FIELDS) -> DriveFile:
        """
        Fetches selected metadata fields of a file.
        Args:
            file_id: The file ID.
            fields: Drive field selection, e.g. "mimeType, parents".
        Returns:
            A DriveFile carrying the requested fields.
        """
        async with self._service() as (aiogoogle, drive):
            return await self._get_metadata(aiogoogle, drive, file_id, fields)

    async def _read_by_id(self, aiogoogle, drive, file_id: str) -> Content:
        drive_file = await self._get_metadata(aiogoogle, drive, file_id, "id, mimeType")
        export_type = drive_file.export_mime_type()
        if export_type:
            logger.info("Exporting %s as %s", sanitize_file_id(file_id), export_type)
            res = await aiogoogle.as_user(
                drive.files.export(fileId=file_id, mimeType=export_type), full_res=True
            )
            return _media_content(res, export_type, binary=export_type == PDF_MIME_TYPE)

        logger.info("Downloading %s", sanitize_file_id(file_id))
        res = await aiogoogle.as_user(drive.files.get(fileId=file_id, alt="media"), full_res=True)
        return _media_content(res, drive_file.mime_type)

    async def read_file_by_id(self, file_id: str) -> Content:
        """
        Reads the content of a file.

        Docs, Sheets and Slides files are exported to plain text, CSV and PDF;
        everything else is downloaded as-is.
        Args:
            file_id: The file ID.
        Returns:
            str for text content, bytes for binary content.
        Raises:
            UnauthenticatedError: No access token is present.
        """
        self.auth.require_access_token()
        async with self._service() as (aiogoogle, drive):
            return await self._read_by_id(aiogoogle, drive, file_id)

    async def read_file(self, folder_id: str, file_name: str) -> Content:
        """
        Reads a file by folder and name.
        Raises:
            DriveFileNotFoundError: No file with that name is in the folder.
        """
        validate_file_name(file_name)
        logger.info("Reading %s from folder %s", sanitize_filename(file_name), sanitize_file_id(folder_id))
        file_id = await self.resolve_file_id(folder_id, file_name)
        return await self.read_file_by_id(file_id)

    async def read_json_file(self, folder_id: str, file_name: str) -> Any:
        """Reads a file and parses it as JSON. Malformed content raises json.JSONDecodeError."""
        content = await self.read_file(folder_id, file_name)
        return json.loads(content)

    async def move_file(self, from_folder_id: str, file_name: str, to_folder_id: str) -> DriveFile:
        """
        Moves a file so that its only parent is the destination folder.
        Args:
            from_folder_id: Folder the file is looked up in.
            file_name: Name of the file.
            to_folder_id: Destination folder ID.
        Returns:
            The updated file.
        Raises:
            DriveFileNotFoundError: No file with that name is in the source folder.
        """
        validate_file_name(file_name)
        validate_folder_id(to_folder_id)
        logger.info("Moving file: %s", sanitize_for_logging(
            file_name=file_name, from_folder_id=from_folder_id, to_folder_id=to_folder_id
        ))

        async with self._service() as (aiogoogle, drive):
            file_id = await self._resolve_file_id(aiogoogle, drive, from_folder_id, file_name)
            current = await self._get_metadata(aiogoogle, drive, file_id, "parents")
            previous_parents = [p for p in current.parents if p != to_folder_id]

            params = {"fileId": file_id, "addParents": to_folder_id, "fields": FILE_FIELDS}
            if previous_parents:
                params["removeParents"] = ",".join(previous_parents)
            try:
                updated = await aiogoogle.as_user(drive.files.update(**params))
            except Exception as e:
                logger.error("Error moving file: %s", e)
                raise
        return DriveFile.from_api(updated)

    async def read_folder(self, folder_id: str) -> List[DriveFile]:
        """
        Lists every item whose parent is the folder.
        Returns:
            The folder's children; empty when the folder has none.
        """
        query = build_parent_query(folder_id)
        logger.info("Listing folder %s", sanitize_file_id(folder_id))
        async with self._service() as (aiogoogle, drive):
            files = await self._list_files(aiogoogle, drive, query, LIST_FIELDS)
        logger.info("Found %d items", len(files))
        return [DriveFile.from_api(f) for f in files]

    async def delete_file_id(self, file_id: str) -> None:
        """Permanently deletes a file by ID."""
        logger.info("Deleting %s", sanitize_file_id(file_id))
        async with self._service() as (aiogoogle, drive):
            await aiogoogle.as_user(drive.files.delete(fileId=file_id))

    async def delete_file(self, folder_id: str, file_name: str) -> None:
        """
        Deletes the single file with this name in the folder.
        Raises:
            DriveFileNotFoundError: No file matched.
            AmbiguousFileError: More than one file matched; nothing is deleted.
        """
        query = build_parent_query(folder_id, file_name)
        async with self._service() as (aiogoogle, drive):
            matches = await self._list_files(aiogoogle, drive, query, ID_LIST_FIELDS)
            if not matches:
                raise DriveFileNotFoundError(folder_id, file_name)
            if len(matches) > 1:
                logger.error("Refusing to delete %s: %d matches", sanitize_filename(file_name), len(matches))
                raise AmbiguousFileError(folder_id, file_name, [m["id"] for m in matches])

            file_id = matches[0]["id"]
            logger.info("Deleting %s", sanitize_file_id(file_id))
            await aiogoogle.as_user(drive.files.delete(fileId=file_id))


def create_client(
    provider: Optional[IdentityProvider] = None,
    config: Optional[DriveClientConfig] = None,
) -> AsyncDriveClient:
    """
    Creates an independent Drive client.
    Args:
        provider: Identity provider; defaults to the google-auth-oauthlib consent flow.
        config: Client settings; defaults to values from the environment.
    Returns:
        A new AsyncDriveClient with its own authentication state.
    """
    config = config or DriveClientConfig.from_env()
    provider = provider or GoogleIdentityProvider(config)
    return AsyncDriveClient(provider, config)
