"""Photo gallery and upload routes (QR codes and event photos)."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as StarletteUploadFile

from ticketbook.database import get_db
from ticketbook.dependencies import get_event_bridge, get_photo_bridge, get_photo_storage, get_qr_storage
from ticketbook.errors import ValidationError
from ticketbook.schemas.event import PhotoOut, PhotoUploadOut, QRUploadOut
from ticketbook.services import event_service, media_service
from ticketbook.services.bridge_client import BridgeClient
from ticketbook.services.storage import LocalStorage

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/photos", response_model=list[PhotoOut])
def list_photos(
    db: Session = Depends(get_db),
    bridge: Optional[BridgeClient] = Depends(get_event_bridge),
):
    """Gallery: every event that has a photo."""
    if bridge is not None:
        return bridge.list_photos()
    return event_service.list_photos(db)


@router.post("/upload-qr", response_model=QRUploadOut)
def upload_qr(
    file: Optional[UploadFile] = File(None),
    eventId: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    storage: LocalStorage = Depends(get_qr_storage),
):
    """Attach a QR image to an existing event."""
    if file is None:
        raise ValidationError("No file uploaded")
    path = media_service.upload_qr_code(db, storage, eventId, file.file.read(), file.filename)
    return {"message": "File uploaded successfully", "path": path}


async def _read_photo_request(request: Request) -> tuple[Optional[str], media_service.DecodedImage]:
    """Pull ``(eventId, image)`` out of a JSON or multipart body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        photo = form.get("photo")
        event_id = form.get("eventId")
        if not photo or not event_id:
            raise ValidationError("Invalid data: photo and eventId are required")
        if isinstance(photo, StarletteUploadFile):
            data = await photo.read()
            if not data:
                raise ValidationError("Empty image data")
            image = media_service.DecodedImage(mime_type=photo.content_type or "image/jpeg", data=data)
        else:
            image = media_service.decode_data_url(photo)
        return event_id, image

    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid data: expected a JSON or multipart body")
    if not isinstance(body, dict) or not body.get("photo") or not body.get("eventId"):
        raise ValidationError("Invalid data: photo and eventId are required")
    return body["eventId"], media_service.decode_data_url(body["photo"])


@router.post("/upload-photo", response_model=PhotoUploadOut)
async def upload_photo(
    request: Request,
    db: Session = Depends(get_db),
    storage=Depends(get_photo_storage),
    bridge: Optional[BridgeClient] = Depends(get_photo_bridge),
):
    """Store a captured photo and record its reference on the event."""
    event_id, image = await _read_photo_request(request)
    return await run_in_threadpool(
        media_service.upload_photo, db, storage, event_id, image, bridge
    )
