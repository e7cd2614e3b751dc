"""Core event service: reads and writes over the ``events`` table.

Responsibilities:
- Upcoming / previous listing split on the calendar day (time of day ignored)
- Id parsing and required-field validation before any write
- Status updates limited to accepted / declined
- QR and photo references recorded as plain strings (local path or URL)

Two behaviours are deliberately lenient: a status or photo update for an id
with no row affects zero rows and still succeeds, and a QR image that fails
to persist during creation leaves ``qr_code_path`` null instead of failing.
"""
import logging
from datetime import date, datetime, time
from typing import Optional, Any

import pytz
from sqlalchemy.orm import Session

from ticketbook.errors import NotFound, StorageError, ValidationError
from ticketbook.models.event import Event, EventStatus
from ticketbook.services.storage import LocalStorage, qr_filename

logger = logging.getLogger(__name__)

FILTERS = ("upcoming", "previous")
SETTABLE_STATUSES = (EventStatus.accepted.value, EventStatus.declined.value)
REQUIRED_FIELDS = ("title", "place", "gradient", "icon", "date", "time")
TIME_FORMATS = ("%H:%M", "%H:%M:%S")
# Largest value the signed 32-bit ``events.id`` column can hold
MAX_EVENT_ID = 2**31 - 1


def today_in(tz_name: str) -> date:
    """Current calendar date in the given IANA timezone."""
    return datetime.now(pytz.timezone(tz_name)).date()


def validate_filter(filter_: Optional[str]) -> str:
    if filter_ not in FILTERS:
        raise ValidationError("Invalid filter parameter")
    return filter_


def validate_status(new_status: Optional[str]) -> str:
    if new_status not in SETTABLE_STATUSES:
        raise ValidationError("Invalid status")
    return new_status


def parse_event_id(raw: Any) -> int:
    """Accept a positive base-10 integer (int or digit string)."""
    if isinstance(raw, bool):
        raise ValidationError("Invalid event ID")
    if isinstance(raw, int):
        event_id = raw
    else:
        text = str(raw).strip() if raw is not None else ""
        if not (text.isascii() and text.isdigit()):
            raise ValidationError("Invalid event ID")
        event_id = int(text)
    if event_id <= 0:
        raise ValidationError("Invalid event ID")
    return event_id


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")


def _parse_time(value: str) -> time:
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time '{value}', expected HH:MM")


def validate_event_fields(fields: dict[str, Optional[str]]) -> dict[str, Any]:
    """Check all six required fields are present and non-empty, then parse date/time."""
    cleaned = {name: (fields.get(name) or "").strip() for name in REQUIRED_FIELDS}
    missing = [name for name, value in cleaned.items() if not value]
    if missing:
        raise ValidationError("Missing required fields: " + ", ".join(missing))

    cleaned["date"] = _parse_date(cleaned["date"])
    cleaned["time"] = _parse_time(cleaned["time"])
    return cleaned


def list_events(db: Session, filter_: Optional[str], today: Optional[date] = None) -> list[Event]:
    """Upcoming: ``date >= today`` ascending. Previous: ``date < today`` descending."""
    validate_filter(filter_)
    today = today or date.today()
    query = db.query(Event)
    if filter_ == "upcoming":
        query = query.filter(Event.date >= today).order_by(Event.date.asc(), Event.id.asc())
    else:
        query = query.filter(Event.date < today).order_by(Event.date.desc(), Event.id.desc())
    return query.all()


def get_event(db: Session, event_id: Any) -> Event:
    event_id = parse_event_id(event_id)
    if event_id > MAX_EVENT_ID:
        raise NotFound("Event not found")
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFound("Event not found")
    return event


def _store_qr_code(storage: LocalStorage, data: bytes, original_name: Optional[str]) -> Optional[str]:
    """Persist a QR image for a new event; failures are logged and yield ``None``."""
    try:
        return storage.save(data, qr_filename(original_name)).reference
    except StorageError as exc:
        logger.warning("QR code upload failed, creating event without it: %s", exc)
        return None


def create_event(
    db: Session,
    fields: dict[str, Optional[str]],
    qr_image: Optional[bytes] = None,
    qr_filename_hint: Optional[str] = None,
    qr_storage: Optional[LocalStorage] = None,
) -> Event:
    """Validate, optionally persist a QR image, then insert one row."""
    values = validate_event_fields(fields)

    qr_code_path = None
    if qr_image and qr_storage is not None:
        qr_code_path = _store_qr_code(qr_storage, qr_image, qr_filename_hint)

    event = Event(**values, status=EventStatus.pending, qr_code_path=qr_code_path)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) on %s", event.title, event.id, event.date)
    return event


def _update_column(db: Session, event_id: int, values: dict) -> int:
    if event_id > MAX_EVENT_ID:
        logger.info("Update on event %s matched no rows", event_id)
        return 0
    rows = (
        db.query(Event)
        .filter(Event.id == event_id)
        .update(values, synchronize_session=False)
    )
    db.commit()
    if rows == 0:
        logger.info("Update on event %s matched no rows", event_id)
    return rows


def update_status(db: Session, event_id: Any, new_status: Optional[str]) -> None:
    event_id = parse_event_id(event_id)
    validate_status(new_status)
    _update_column(db, event_id, {Event.status: EventStatus(new_status)})
    logger.info("Set status of event %s to %s", event_id, new_status)


def update_photo_path(db: Session, event_id: Any, reference: Optional[str]) -> None:
    """Unconditionally overwrite ``photo_path``."""
    event_id = parse_event_id(event_id)
    _update_column(db, event_id, {Event.photo_path: reference})
    logger.info("Recorded photo for event %s: %s", event_id, reference)


def update_qr_code_path(db: Session, event_id: Any, reference: Optional[str]) -> None:
    event_id = parse_event_id(event_id)
    _update_column(db, event_id, {Event.qr_code_path: reference})
    logger.info("Recorded QR code for event %s: %s", event_id, reference)


def list_photos(db: Session) -> list[Event]:
    """Events that have a photo, newest first."""
    return (
        db.query(Event)
        .filter(Event.photo_path.isnot(None))
        .order_by(Event.date.desc(), Event.id.desc())
        .all()
    )
