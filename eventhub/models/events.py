import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.database.db import Base


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (Index("ix_events_start_at_id", "start_at", "id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(250), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    start_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    location: Mapped[str] = mapped_column(String(250), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    image_file_id: Mapped[str | None] = mapped_column(String(41), nullable=True)

    registrations: Mapped[list["Registration"]] = relationship(back_populates="event")
