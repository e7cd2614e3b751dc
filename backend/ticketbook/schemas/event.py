"""Pydantic schemas for Events, photos and uploads."""
from __future__ import annotations
from datetime import date as date_type, time as time_type
from typing import Optional
from pydantic import BaseModel, field_serializer


def format_time(value: time_type) -> str:
    """``HH:MM`` when seconds are zero, else ``HH:MM:SS``."""
    if value.second == 0:
        return value.strftime("%H:%M")
    return value.strftime("%H:%M:%S")


class EventOut(BaseModel):
    id: int
    title: str
    place: str
    gradient: str
    icon: str
    date: date_type
    time: time_type
    status: str
    qr_code_path: Optional[str] = None
    photo_path: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_serializer("time")
    def _serialize_time(self, value: time_type) -> str:
        return format_time(value)


class EventCreated(BaseModel):
    message: str
    id: int


class StatusUpdate(BaseModel):
    # Optional so a missing key is reported as 400 by the service, not 422.
    status: Optional[str] = None


class MessageOut(BaseModel):
    message: str


class PhotoOut(BaseModel):
    id: int
    photo_path: str
    title: str
    date: date_type

    model_config = {"from_attributes": True}


class QRUploadOut(BaseModel):
    message: str
    path: str


class PhotoUploadOut(BaseModel):
    photoPath: str
    fileId: Optional[str] = None
    mimeType: str
    size: int
