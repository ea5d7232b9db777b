import asyncio
import itertools
import json
import re
import threading

import pytest
from unittest.mock import Mock, patch, AsyncMock
from aiogoogle.excs import HTTPError
from aiogoogle.models import Response

from gdrive_helper.auth.provider import IdentityProvider, TokenClient
from gdrive_helper.config import DriveClientConfig
from gdrive_helper.clients.drive.async_client import AsyncDriveClient


# Identity provider fakes

class FakeTokenClient(TokenClient):
    """Token client that answers each request with the next queued response."""

    def __init__(self, callback, responses=None, threaded=False):
        self.callback = callback
        self.responses = list(responses or [{"access_token": "token-1"}])
        self.threaded = threaded
        self.requests = 0

    def request_access_token(self):
        self.requests += 1
        if not self.responses:
            return
        response = self.responses.pop(0)
        if self.threaded:
            threading.Timer(0.01, self.callback, args=(response,)).start()
        else:
            self.callback(response)


class FakeIdentityProvider(IdentityProvider):
    """Identity provider that becomes available after a number of checks."""

    def __init__(self, ready_after=0, responses=None, threaded=False):
        self.ready_after = ready_after
        self.checks = 0
        self.responses = responses
        self.threaded = threaded
        self.token_client = None
        self.init_args = None

    def is_available(self):
        self.checks += 1
        return self.checks > self.ready_after

    def init_token_client(self, client_id, scope, callback):
        self.init_args = (client_id, scope)
        self.token_client = FakeTokenClient(callback, self.responses, self.threaded)
        return self.token_client


@pytest.fixture
def fake_provider():
    return FakeIdentityProvider()


@pytest.fixture
def test_config():
    return DriveClientConfig(client_id="client-123", provider_timeout=1.0, poll_interval=0.01)


@pytest.fixture
def drive_client(fake_provider, test_config):
    """Drive client with an access token already installed."""
    client = AsyncDriveClient(fake_provider, test_config)
    client.set_access_token("test-token")
    return client


# Mocked aiogoogle session

@pytest.fixture
def mock_async_drive_context():
    """Mock async Drive service context with aiogoogle and service."""
    mock_aiogoogle = AsyncMock()
    mock_drive_service = Mock()
    return mock_aiogoogle, mock_drive_service


@pytest.fixture
def mock_get_async_drive_service(mock_async_drive_context):
    """Mock the async Drive service context manager."""
    with patch('gdrive_helper.clients.drive.async_client.async_drive_service') as mock_context:
        mock_context.return_value.__aenter__.return_value = mock_async_drive_context
        mock_context.return_value.__aexit__.return_value = None
        yield mock_context


# In-memory Drive backend

_LITERAL = r"'((?:[^'\\]|\\.)*)'"
_NAME_QUERY = re.compile(rf"^name = {_LITERAL} and {_LITERAL} in parents$")
_PARENT_QUERY = re.compile(rf"^{_LITERAL} in parents$")


def _unescape(value):
    return re.sub(r"\\(.)", r"\1", value)


def _http_error(status, reason):
    return HTTPError(f"{status} {reason}", req=None, res=Mock(status_code=status, reason=reason))


class FakeRequest:
    """Request built by FakeFilesResource; callers may set attributes on it like an aiogoogle Request."""

    def __init__(self, op, params):
        self.op = op
        self.params = params
        self.upload_file_content_type = None


class FakeFilesResource:
    """Stands in for the discovered drive.files resource."""

    def list(self, **params):
        return FakeRequest("list", params)

    def get(self, **params):
        return FakeRequest("get", params)

    def create(self, **params):
        return FakeRequest("create", params)

    def update(self, **params):
        return FakeRequest("update", params)

    def delete(self, **params):
        return FakeRequest("delete", params)

    def export(self, **params):
        return FakeRequest("export", params)


FIXED_TIMESTAMP = "2025-01-15T10:00:00.000Z"


class FakeDriveBackend:
    """Stateful Drive v3 stand-in answering with aiogoogle Response objects."""

    EXPORTS = {
        "application/vnd.google-apps.document",
        "application/vnd.google-apps.spreadsheet",
        "application/vnd.google-apps.presentation",
    }

    def __init__(self, page_size=None):
        self.files = {}
        self.calls = []
        self.page_size = page_size
        self._ids = itertools.count(1)

    def add_file(self, name, parents, content=b"", mime_type="text/plain", content_type=None):
        file_id = f"file-{next(self._ids)}"
        record = {
            "id": file_id,
            "name": name,
            "mimeType": mime_type,
            "parents": list(parents),
            "createdTime": FIXED_TIMESTAMP,
            "modifiedTime": FIXED_TIMESTAMP,
            "content": content,
            "contentType": content_type,
        }
        if mime_type not in self.EXPORTS:
            record["size"] = str(len(content))
        self.files[file_id] = record
        return file_id

    def _metadata(self, record):
        return {
            k: (list(v) if k == "parents" else v)
            for k, v in record.items() if k not in ("content", "contentType")
        }

    def _lookup(self, file_id):
        if file_id not in self.files:
            raise _http_error(404, "Not Found")
        return self.files[file_id]

    def _media(self, content, mime_type):
        # aiohttp parses JSON bodies into res.json; other bodies land in res.data
        if mime_type == "application/json":
            return Response(status_code=200, json=json.loads(content.decode("utf-8")))
        if mime_type.startswith("text/"):
            return Response(status_code=200, data=content.decode("utf-8"))
        return Response(status_code=200, data=content)

    def execute(self, request):
        self.calls.append(request)
        result = getattr(self, f"_do_{request.op}")(request)
        if isinstance(result, Response):
            return result
        return Response(status_code=200 if result is not None else 204, json=result)

    def _do_list(self, request):
        params = request.params
        query = params["q"]
        match = _NAME_QUERY.match(query)
        if match:
            name, folder = _unescape(match.group(1)), _unescape(match.group(2))
        else:
            match = _PARENT_QUERY.match(query)
            if not match:
                raise _http_error(400, "Invalid Value")
            name, folder = None, _unescape(match.group(1))

        found = [
            self._metadata(f) for f in self.files.values()
            if folder in f["parents"] and (name is None or f["name"] == name)
        ]
        if not self.page_size:
            return {"files": found}
        start = int(params.get("pageToken") or 0)
        result = {"files": found[start:start + self.page_size]}
        if start + self.page_size < len(found):
            result["nextPageToken"] = str(start + self.page_size)
        return result

    def _do_get(self, request):
        params = request.params
        record = self._lookup(params["fileId"])
        if params.get("alt") == "media":
            if record["mimeType"] in self.EXPORTS:
                raise _http_error(403, "Only files with binary content can be downloaded")
            return self._media(record["content"], record["mimeType"])
        return self._metadata(record)

    def _do_export(self, request):
        params = request.params
        record = self._lookup(params["fileId"])
        if record["mimeType"] not in self.EXPORTS:
            raise _http_error(403, "Export only supports Docs Editors files")
        return self._media(record["content"], params["mimeType"])

    def _do_create(self, request):
        metadata = request.params["json"]
        file_id = self.add_file(
            metadata["name"],
            metadata["parents"],
            request.params["upload_file"],
            metadata["mimeType"],
            content_type=request.upload_file_content_type,
        )
        return self._metadata(self.files[file_id])

    def _do_update(self, request):
        params = request.params
        record = self._lookup(params["fileId"])
        removed = params.get("removeParents", "")
        parents = [p for p in record["parents"] if p not in removed.split(",")]
        if params["addParents"] not in parents:
            parents.append(params["addParents"])
        record["parents"] = parents
        return self._metadata(record)

    def _do_delete(self, request):
        file_id = request.params["fileId"]
        self._lookup(file_id)
        del self.files[file_id]
        return None


class FakeAiogoogle:
    def __init__(self, backend):
        self.backend = backend

    async def as_user(self, request, full_res=False):
        await asyncio.sleep(0)
        res = self.backend.execute(request)
        return res if full_res else res.content


@pytest.fixture
def fake_backend():
    return FakeDriveBackend()


@pytest.fixture
def fake_drive_service(fake_backend):
    """Routes the Drive client's sessions to the in-memory backend."""
    drive = Mock()
    drive.files = FakeFilesResource()
    with patch('gdrive_helper.clients.drive.async_client.async_drive_service') as mock_context:
        mock_context.return_value.__aenter__.return_value = (FakeAiogoogle(fake_backend), drive)
        mock_context.return_value.__aexit__.return_value = None
        yield mock_context
