"""Error taxonomy shared by services, storage backends and the bridge client.

Each error is an ``HTTPException`` carrying its own status code, so services
can raise them directly and FastAPI renders ``{"detail": message}`` at the
request boundary. Nothing here is retried.
"""
from typing import Optional

from fastapi import HTTPException, status


class TicketbookError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(TicketbookError):
    """Bad or missing client input."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(TicketbookError):
    status_code = status.HTTP_404_NOT_FOUND


class ConfigurationError(TicketbookError):
    """Required credentials or settings are missing."""


class StorageError(TicketbookError):
    """Local disk I/O failed."""


class UploadError(TicketbookError):
    """The cloud upload or the follow-up photo reference update failed."""


class RemoteError(TicketbookError):
    """The bridge service answered with a non-2xx status or was unreachable."""

    def __init__(self, message: str, remote_status: Optional[int] = None):
        super().__init__(message)
        self.remote_status = remote_status
