"""Media storage backends: local public directory or a Google Drive folder.

Both backends expose ``save(data, filename, mime_type) -> StoredFile`` so the
upload pipeline never needs to know where bytes end up. The returned
``reference`` is what gets recorded on the event: a ``/uploads/...`` style
path for local files, a Drive view URL for cloud files.
"""
import io
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from ticketbook.errors import ConfigurationError, StorageError, UploadError

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
REQUIRED_CREDENTIAL_FIELDS = ("project_id", "private_key", "client_email")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def safe_filename(name: Optional[str], default: str = "file") -> str:
    """Strip directories and anything outside ``[A-Za-z0-9._-]`` from a client filename."""
    base = os.path.basename((name or "").replace("\\", "/"))
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or default


def qr_filename(original_name: Optional[str]) -> str:
    return f"{timestamp_ms()}-{safe_filename(original_name, default='qr.png')}"


def photo_filename(event_id: int) -> str:
    return f"photo_{event_id}_{timestamp_ms()}.jpg"


@dataclass
class StoredFile:
    reference: str
    file_id: Optional[str] = None


class LocalStorage:
    """Writes files under ``root`` and references them as ``<url_prefix>/<name>``."""

    def __init__(self, root, url_prefix: str):
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")

    def save(self, data: bytes, filename: str, mime_type: Optional[str] = None) -> StoredFile:
        name = safe_filename(filename)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not create upload directory {self.root}: {exc}") from exc

        path = self.root / name
        try:
            with open(path, "wb") as fh:
                fh.write(data)
        except OSError as exc:
            raise StorageError(f"Could not write {name}: {exc}") from exc

        logger.info("Stored %d bytes at %s", len(data), path)
        return StoredFile(reference=f"{self.url_prefix}/{name}")

    def resolve(self, reference: str) -> Path:
        """Map a reference produced by ``save`` back to its file on disk."""
        prefix = self.url_prefix + "/"
        if not reference.startswith(prefix):
            raise StorageError(f"{reference} is not stored under {self.url_prefix}")
        return self.root / safe_filename(reference[len(prefix):])


class DriveStorage:
    """Uploads into one Drive folder under service-account credentials.

    Credentials are checked and the API client is built lazily on the first
    ``save`` call, so constructing the backend never touches the network.
    An already-built ``service`` may be injected.
    """

    def __init__(self, credentials: dict[str, Any], folder_id: str, service: Any = None):
        self.credentials = credentials
        self.folder_id = folder_id
        self._service = service

    def validate_credentials(self) -> None:
        missing = [f for f in REQUIRED_CREDENTIAL_FIELDS if not self.credentials.get(f)]
        if missing:
            raise ConfigurationError(
                "Missing required credentials for Google Drive: " + ", ".join(missing)
            )
        if not self.folder_id:
            raise ConfigurationError("Missing Google Drive folder id")

    def _get_service(self):
        if self._service is None:
            self.validate_credentials()
            try:
                creds = service_account.Credentials.from_service_account_info(
                    self.credentials, scopes=DRIVE_SCOPES
                )
            except ValueError as exc:
                raise ConfigurationError(f"Invalid Google service-account credentials: {exc}") from exc
            self._service = build("drive", "v3", credentials=creds, cache_discovery=False)
        return self._service

    def save(self, data: bytes, filename: str, mime_type: Optional[str] = None) -> StoredFile:
        service = self._get_service()
        media = MediaIoBaseUpload(
            io.BytesIO(data), mimetype=mime_type or "application/octet-stream", resumable=False
        )
        try:
            response = service.files().create(
                body={"name": filename, "parents": [self.folder_id]},
                media_body=media,
                fields="id,webViewLink,webContentLink",
            ).execute()
        except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as exc:
            raise UploadError(f"Google Drive upload failed: {exc}") from exc

        file_id = (response or {}).get("id")
        if not file_id:
            raise UploadError("Failed to upload to Google Drive: no file id returned")

        link = response.get("webViewLink") or f"https://drive.google.com/file/d/{file_id}/view"
        logger.info("Uploaded %s to Drive as %s", filename, file_id)
        return StoredFile(reference=link, file_id=file_id)
