import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator, model_validator

from eventhub.domain.models import EventDraft


# ---------- Event ----------
class EventIn(BaseModel):
    title: str = Field(min_length=1, max_length=250)
    description: str = Field(min_length=1, max_length=10000)
    start_at: datetime
    end_at: datetime
    location: str = Field(min_length=1, max_length=250)
    category: str | None = Field(default=None, max_length=100)
    max_participants: int = Field(ge=1, le=9999)
    image_file_id: str | None = Field(default=None, max_length=41)

    @field_validator("start_at", "end_at")
    @classmethod
    def as_naive_utc(cls, value: datetime) -> datetime:
        # Stored without zone information
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def check_window(self):
        if self.start_at >= self.end_at:
            raise ValueError("start_at must be before end_at")
        return self

    def to_draft(self) -> EventDraft:
        return EventDraft(**self.model_dump())


class EventCreate(EventIn):
    pass


class EventUpdate(EventIn):
    pass


class EventSummaryOut(BaseModel):
    id: uuid.UUID
    title: str
    start_at: datetime
    end_at: datetime
    location: str
    category: str | None
    max_participants: int
    current_participants_count: int
    image_file_id: str | None

    class Config:
        from_attributes = True


class EventOut(EventSummaryOut):
    description: str


class EventPageOut(BaseModel):
    items: list[EventSummaryOut]
    total_items_count: int
    page_number: int
    page_size: int
    pages_count: int

    class Config:
        from_attributes = True
