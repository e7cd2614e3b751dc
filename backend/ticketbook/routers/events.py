"""Event API routes: delegates to event_service, or to the bridge when configured."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from ticketbook.database import get_db
from ticketbook.dependencies import get_event_bridge, get_qr_storage, get_today
from ticketbook.schemas.event import EventCreated, EventOut, MessageOut, StatusUpdate
from ticketbook.services import event_service
from ticketbook.services.bridge_client import BridgeClient
from ticketbook.services.storage import LocalStorage

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[EventOut])
def list_events(
    filter: Optional[str] = Query(None, description="upcoming or previous"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    bridge: Optional[BridgeClient] = Depends(get_event_bridge),
):
    """Upcoming events soonest first, or previous events most recent first."""
    if bridge is not None:
        return bridge.list_events(filter)
    return event_service.list_events(db, filter, today=today)


@router.post("", response_model=EventCreated, status_code=status.HTTP_201_CREATED)
def create_event(
    title: Optional[str] = Form(None),
    place: Optional[str] = Form(None),
    gradient: Optional[str] = Form(None),
    icon: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    qrCode: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    qr_storage: LocalStorage = Depends(get_qr_storage),
):
    """Create an event from a multipart form, with an optional QR image."""
    qr_image = qrCode.file.read() if qrCode is not None else None
    event = event_service.create_event(
        db=db,
        fields={
            "title": title,
            "place": place,
            "gradient": gradient,
            "icon": icon,
            "date": date,
            "time": time,
        },
        qr_image=qr_image,
        qr_filename_hint=qrCode.filename if qrCode is not None else None,
        qr_storage=qr_storage,
    )
    return {"message": "Event created successfully", "id": event.id}


@router.get("/{event_id}", response_model=EventOut)
def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    bridge: Optional[BridgeClient] = Depends(get_event_bridge),
):
    """Fetch a single event by ID."""
    if bridge is not None:
        return bridge.get_event(event_id)
    return event_service.get_event(db, event_id)


@router.put("/{event_id}/status", response_model=MessageOut)
def update_event_status(
    event_id: str,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    bridge: Optional[BridgeClient] = Depends(get_event_bridge),
):
    """Accept or decline an invitation."""
    if bridge is not None:
        bridge.update_status(event_id, payload.status)
    else:
        event_service.update_status(db, event_id, payload.status)
    return {"message": "Event status updated successfully"}
