"""Event ORM model: the ``events`` table."""
import enum
from sqlalchemy import Column, Date, DateTime, Integer, String, Time, Enum as SAEnum
from sqlalchemy.sql import func
from ticketbook.database import Base


class EventStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    place = Column(String(255), nullable=False)
    gradient = Column(String(50), nullable=False)  # UI colour theme token
    icon = Column(String(50), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.pending)
    qr_code_path = Column(String(500), nullable=True)
    photo_path = Column(String(1000), nullable=True)  # local path or full URL
    created_at = Column(DateTime(timezone=True), server_default=func.now())
