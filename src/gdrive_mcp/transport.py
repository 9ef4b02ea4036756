"""Transport layer for the Docs, Drive and Sheets REST APIs.

Defines the Transport protocol and implementations:
- GoogleWorkspaceTransport: Production transport using the Google APIs
- LocalFileTransport: Test transport reading from local golden files
"""

from __future__ import annotations

import json
import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

import certifi
import httpx
from loguru import logger

from gdrive_mcp.exceptions import UpstreamServiceError

# API constants
DOCS_API_BASE = "https://docs.googleapis.com/v1/documents"
DRIVE_API_BASE = "https://www.googleapis.com/drive/v3/files"
SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TIMEOUT = 60

SEARCH_FIELDS = "files(id, name, mimeType, webViewLink, modifiedTime, owners, size)"
COMMENTS_FIELDS = (
    "comments(id,content,quotedFileContent,anchor,resolved,"
    "createdTime,modifiedTime,author,replies),nextPageToken"
)
COMMENT_FIELDS = "id,content,author,createdTime"


class TransportError(UpstreamServiceError):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""


class NotFoundError(TransportError):
    """Raised when a file is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class DocumentData:
    """Complete document data from the Google Docs API.

    ``raw`` is the full ``documents.get`` response; locator expressions run
    against it and it is echoed back to the caller after each update.
    """

    document_id: str
    title: str
    raw: dict[str, Any]


class Transport(ABC):
    """Abstract base class for Google Workspace data transport.

    Implementations must provide methods to read and mutate documents and
    to reach the Drive and Sheets endpoints the tools use.
    """

    @abstractmethod
    async def get_document(self, document_id: str) -> DocumentData:
        """Fetch complete document data.

        Args:
            document_id: The document identifier

        Returns:
            DocumentData with full document contents
        """
        ...

    @abstractmethod
    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Apply batchUpdate requests to a document as one atomic batch.

        Args:
            document_id: The document identifier
            requests: List of batchUpdate request objects

        Returns:
            API response containing replies for each request
        """
        ...

    @abstractmethod
    async def get_file_metadata(self, file_id: str) -> dict[str, Any]:
        """Fetch ``id``, ``name`` and ``mimeType`` of a Drive file."""
        ...

    @abstractmethod
    async def search_files(self, query: str, page_size: int) -> list[dict[str, Any]]:
        """Run a Drive ``files.list`` query, newest first.

        Args:
            query: Drive query language expression
            page_size: Maximum number of files to return

        Returns:
            List of file dicts with the fields in ``SEARCH_FIELDS``
        """
        ...

    @abstractmethod
    async def list_comments(self, file_id: str) -> list[dict[str, Any]]:
        """Fetch all non-deleted comments on a file via Drive API v3."""
        ...

    @abstractmethod
    async def create_comment(self, file_id: str, content: str) -> dict[str, Any]:
        """Create a new unanchored comment on a file."""
        ...

    @abstractmethod
    async def create_reply(
        self, file_id: str, comment_id: str, content: str
    ) -> dict[str, Any]:
        """Create a reply on an existing comment."""
        ...

    @abstractmethod
    async def resolve_comment(self, file_id: str, comment_id: str) -> dict[str, Any]:
        """Mark a comment thread as resolved."""
        ...

    @abstractmethod
    async def get_sheet_titles(self, spreadsheet_id: str) -> list[str]:
        """Return the titles of a spreadsheet's sheets, in tab order."""
        ...

    @abstractmethod
    async def get_sheet_values(
        self, spreadsheet_id: str, range_name: str
    ) -> list[list[Any]]:
        """Return the cell values of ``range_name`` as rows."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleWorkspaceTransport(Transport):
    """Production transport that talks to the Docs, Drive and Sheets APIs.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth2 access token with drive and documents scopes
            timeout: Request timeout in seconds
        """
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    async def get_document(self, document_id: str) -> DocumentData:
        """Fetch document data from the Google Docs API."""
        response = await self._request("GET", f"{DOCS_API_BASE}/{document_id}")
        return DocumentData(
            document_id=response.get("documentId", document_id),
            title=response.get("title", ""),
            raw=response,
        )

    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Apply batchUpdate requests via the Google Docs API."""
        url = f"{DOCS_API_BASE}/{document_id}:batchUpdate"
        return await self._request("POST", url, json={"requests": requests})

    async def get_file_metadata(self, file_id: str) -> dict[str, Any]:
        """Fetch basic file metadata via Drive API v3."""
        return await self._request(
            "GET",
            f"{DRIVE_API_BASE}/{file_id}",
            params={"fields": "id,name,mimeType"},
        )

    async def search_files(self, query: str, page_size: int) -> list[dict[str, Any]]:
        """Search files via Drive API v3."""
        response = await self._request(
            "GET",
            DRIVE_API_BASE,
            params={
                "q": query,
                "pageSize": page_size,
                "fields": SEARCH_FIELDS,
                "orderBy": "modifiedTime desc",
            },
        )
        files: list[dict[str, Any]] = response.get("files", [])
        return files

    async def list_comments(self, file_id: str) -> list[dict[str, Any]]:
        """Fetch all comments via Drive API v3 with pagination."""
        all_comments: list[dict[str, Any]] = []
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {
                "fields": COMMENTS_FIELDS,
                "includeDeleted": "false",
                "pageSize": 100,
            }
            if page_token:
                params["pageToken"] = page_token
            response = await self._request(
                "GET", f"{DRIVE_API_BASE}/{file_id}/comments", params=params
            )
            all_comments.extend(response.get("comments", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        return all_comments

    async def create_comment(self, file_id: str, content: str) -> dict[str, Any]:
        """Create a new comment via Drive API v3."""
        return await self._request(
            "POST",
            f"{DRIVE_API_BASE}/{file_id}/comments",
            params={"fields": COMMENT_FIELDS},
            json={"content": content},
        )

    async def create_reply(
        self, file_id: str, comment_id: str, content: str
    ) -> dict[str, Any]:
        """Create a reply on an existing comment via Drive API v3."""
        return await self._request(
            "POST",
            f"{DRIVE_API_BASE}/{file_id}/comments/{comment_id}/replies",
            params={"fields": COMMENT_FIELDS},
            json={"content": content},
        )

    async def resolve_comment(self, file_id: str, comment_id: str) -> dict[str, Any]:
        """Set ``resolved`` on a comment via Drive API v3."""
        return await self._request(
            "PATCH",
            f"{DRIVE_API_BASE}/{file_id}/comments/{comment_id}",
            params={"fields": "id,resolved"},
            json={"resolved": True},
        )

    async def get_sheet_titles(self, spreadsheet_id: str) -> list[str]:
        """Fetch sheet titles via the Google Sheets API."""
        response = await self._request(
            "GET",
            f"{SHEETS_API_BASE}/{spreadsheet_id}",
            params={"fields": "sheets.properties.title"},
        )
        return [
            sheet.get("properties", {}).get("title", "")
            for sheet in response.get("sheets", [])
        ]

    async def get_sheet_values(
        self, spreadsheet_id: str, range_name: str
    ) -> list[list[Any]]:
        """Fetch a range of cell values via the Google Sheets API."""
        response = await self._request(
            "GET", f"{SHEETS_API_BASE}/{spreadsheet_id}/values/{range_name}"
        )
        values: list[list[Any]] = response.get("values", [])
        return values

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON body."""
        logger.debug("{} {}", method, url)
        try:
            response = await self._client.request(method, url, params=params, json=json)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as e:
            self._handle_http_error(e)
            raise  # unreachable, but makes type checker happy
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    def _handle_http_error(self, e: httpx.HTTPStatusError) -> None:
        """Handle HTTP errors and raise appropriate exceptions."""
        status = e.response.status_code
        if status == 401:
            raise AuthenticationError("Invalid or expired access token") from e
        if status == 403:
            raise AuthenticationError(
                "Access denied. Check your scopes and permissions."
            ) from e
        if status == 404:
            raise NotFoundError(
                "File not found. Check the ID and sharing permissions."
            ) from e
        body = e.response.text
        raise APIError(f"API error ({status}): {body}", status_code=status) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


@dataclass
class LocalFileTransport(Transport):
    """Test transport that reads from local golden files.

    Expected directory structure:
        golden_dir/
            <document_id>.json           documents.get response
            <file_id>_comments.json      {"comments": [...]}
            <spreadsheet_id>_sheet.json  {"sheets": [...], "values": {range: rows}}
            files.json                   {"files": [...]} for metadata and search

    Mutations are not applied; they are recorded on the instance so tests
    can assert on what would have been sent.
    """

    golden_dir: Path
    batch_updates: list[tuple[str, list[dict[str, Any]]]] = field(default_factory=list)
    created_comments: list[tuple[str, str]] = field(default_factory=list)
    created_replies: list[tuple[str, str, str]] = field(default_factory=list)
    resolved_comments: list[tuple[str, str]] = field(default_factory=list)
    search_queries: list[str] = field(default_factory=list)
    batch_replies: list[dict[str, Any]] | None = None
    closed: bool = False

    def _read(self, name: str) -> dict[str, Any]:
        path = self.golden_dir / name
        if not path.exists():
            raise NotFoundError(f"Golden file not found: {name}")
        data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        return data

    async def get_document(self, document_id: str) -> DocumentData:
        """Read document data from local file."""
        response = self._read(f"{document_id}.json")
        return DocumentData(
            document_id=response.get("documentId", document_id),
            title=response.get("title", ""),
            raw=response,
        )

    async def batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Record the batch and return canned or empty replies."""
        self.batch_updates.append((document_id, requests))
        if self.batch_replies is not None:
            return {"documentId": document_id, "replies": self.batch_replies}
        return {"documentId": document_id, "replies": [{}] * len(requests)}

    async def get_file_metadata(self, file_id: str) -> dict[str, Any]:
        """Look the file up in ``files.json``."""
        for file in self._read("files.json").get("files", []):
            if file.get("id") == file_id:
                result: dict[str, Any] = file
                return result
        raise NotFoundError(f"File not found: {file_id}")

    async def search_files(self, query: str, page_size: int) -> list[dict[str, Any]]:
        """Return the first ``page_size`` entries of ``files.json``."""
        self.search_queries.append(query)
        path = self.golden_dir / "files.json"
        if not path.exists():
            return []
        files: list[dict[str, Any]] = self._read("files.json").get("files", [])
        return files[:page_size]

    async def list_comments(self, file_id: str) -> list[dict[str, Any]]:
        """Read comments from local golden file."""
        path = self.golden_dir / f"{file_id}_comments.json"
        if not path.exists():
            return []
        result: list[dict[str, Any]] = self._read(path.name).get("comments", [])
        return result

    async def create_comment(self, file_id: str, content: str) -> dict[str, Any]:
        """Mock create_comment for testing."""
        self.created_comments.append((file_id, content))
        return {
            "id": "mock_comment_id",
            "content": content,
            "author": {"displayName": "Test User"},
            "createdTime": "2024-01-01T00:00:00.000Z",
        }

    async def create_reply(
        self, file_id: str, comment_id: str, content: str
    ) -> dict[str, Any]:
        """Mock create_reply for testing."""
        self.created_replies.append((file_id, comment_id, content))
        return {
            "id": "mock_reply_id",
            "content": content,
            "author": {"displayName": "Test User"},
            "createdTime": "2024-01-01T00:00:00.000Z",
        }

    async def resolve_comment(self, file_id: str, comment_id: str) -> dict[str, Any]:
        """Mock resolve_comment for testing."""
        self.resolved_comments.append((file_id, comment_id))
        return {"id": comment_id, "resolved": True}

    async def get_sheet_titles(self, spreadsheet_id: str) -> list[str]:
        """Read sheet titles from local golden file."""
        data = self._read(f"{spreadsheet_id}_sheet.json")
        return [
            sheet.get("properties", {}).get("title", "")
            for sheet in data.get("sheets", [])
        ]

    async def get_sheet_values(
        self, spreadsheet_id: str, range_name: str
    ) -> list[list[Any]]:
        """Read a range from local golden file; unknown ranges are empty."""
        data = self._read(f"{spreadsheet_id}_sheet.json")
        values: list[list[Any]] = data.get("values", {}).get(range_name, [])
        return values

    async def close(self) -> None:
        """Mark the transport closed."""
        self.closed = True
