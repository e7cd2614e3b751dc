"""FastAPI dependencies that build storage and bridge components from settings.

Components take explicit arguments; only these providers read ``settings``,
so tests swap any of them through ``app.dependency_overrides``.
"""
import os
from datetime import date
from typing import Optional

from ticketbook.config import settings
from ticketbook.errors import ConfigurationError
from ticketbook.services.bridge_client import BridgeClient
from ticketbook.services.event_service import today_in
from ticketbook.services.storage import DriveStorage, LocalStorage


def get_today() -> date:
    return today_in(settings.TIMEZONE)


def get_qr_storage() -> LocalStorage:
    return LocalStorage(os.path.join(settings.PUBLIC_DIR, "qr-codes"), "/qr-codes")


def get_photo_storage():
    if settings.PHOTO_STORAGE == "drive":
        return DriveStorage(settings.google_credentials, settings.DRIVE_FOLDER_ID)
    if settings.PHOTO_STORAGE == "local":
        return LocalStorage(os.path.join(settings.PUBLIC_DIR, "uploads"), "/uploads")
    raise ConfigurationError(f"Unknown PHOTO_STORAGE '{settings.PHOTO_STORAGE}'")


def _bridge_client() -> BridgeClient:
    return BridgeClient(settings.BRIDGE_URL, settings.BRIDGE_API_KEY, timezone=settings.TIMEZONE)


def get_event_bridge() -> Optional[BridgeClient]:
    """Bridge client when event reads and status writes are served remotely."""
    if settings.EVENT_BACKEND == "bridge":
        return _bridge_client()
    return None


def get_photo_bridge() -> Optional[BridgeClient]:
    """Bridge client when uploaded photo references are recorded remotely."""
    if settings.PHOTO_PATH_TARGET == "bridge":
        return _bridge_client()
    return None


def get_auth_users() -> list[dict]:
    return settings.AUTH_USERS
