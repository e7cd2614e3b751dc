"""Photo and QR upload pipeline.

A photo arrives either as raw bytes (multipart) or as a ``data:<mime>;base64,``
URL (JSON). Data URLs are validated completely before any storage backend is
touched. The stored reference is then recorded against the event, either in
the local database or by forwarding it to the bridge service; exactly one of
the two is used per call.
"""
import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from ticketbook.errors import RemoteError, UploadError, ValidationError
from ticketbook.services import event_service
from ticketbook.services.bridge_client import BridgeClient
from ticketbook.services.storage import LocalStorage, photo_filename, qr_filename

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:([a-zA-Z0-9]+/[a-zA-Z0-9\-.+]+);base64,")
BASE64_MARKER = ";base64,"


@dataclass
class DecodedImage:
    mime_type: str
    data: bytes


def decode_data_url(data_url: Any) -> DecodedImage:
    """Validate and decode ``data:<mime>;base64,<payload>``.

    Checks, in order: the base64 marker, the MIME-prefixed shape, a non-empty
    payload, valid base64, and a non-empty decoded buffer.
    """
    if not isinstance(data_url, str) or "base64" not in data_url:
        raise ValidationError("Invalid image format: missing base64 marker")

    match = DATA_URL_PATTERN.match(data_url)
    if not match:
        raise ValidationError("Invalid image format: expected data:<mime-type>;base64,<payload>")
    mime_type = match.group(1)

    payload = data_url.split(BASE64_MARKER, 1)[1].strip()
    if not payload:
        raise ValidationError("Invalid base64 data: empty payload")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid base64 data: payload is not valid base64")

    if not data:
        raise ValidationError("Empty image data")
    return DecodedImage(mime_type=mime_type, data=data)


def record_photo_path(
    db: Session,
    event_id: int,
    reference: str,
    bridge: Optional[BridgeClient] = None,
) -> None:
    """Record the reference locally, or on the bridge when one is configured."""
    if bridge is None:
        event_service.update_photo_path(db, event_id, reference)
        return
    try:
        bridge.update_photo_path(event_id, reference)
    except RemoteError as exc:
        raise UploadError(f"Failed to update photo path: {exc.message}") from exc


def upload_photo(
    db: Session,
    storage: Any,
    event_id: Any,
    image: DecodedImage,
    bridge: Optional[BridgeClient] = None,
) -> dict:
    """Store one photo for an event and record where it went."""
    event_id = event_service.parse_event_id(event_id)
    if not image.data:
        raise ValidationError("Empty image data")
    if bridge is not None:
        bridge.validate_config()

    filename = photo_filename(event_id)
    stored = storage.save(image.data, filename, image.mime_type)
    record_photo_path(db, event_id, stored.reference, bridge=bridge)

    logger.info("Photo for event %s stored at %s (%d bytes)", event_id, stored.reference, len(image.data))
    return {
        "photoPath": stored.reference,
        "fileId": stored.file_id,
        "mimeType": image.mime_type,
        "size": len(image.data),
    }


def upload_qr_code(
    db: Session,
    storage: LocalStorage,
    event_id: Any,
    data: bytes,
    original_name: Optional[str],
) -> str:
    """Store a QR image for an existing event; storage failures propagate."""
    event_id = event_service.parse_event_id(event_id)
    if not data:
        raise ValidationError("No file uploaded")
    stored = storage.save(data, qr_filename(original_name))
    event_service.update_qr_code_path(db, event_id, stored.reference)
    return stored.reference
