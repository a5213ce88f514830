"""Domain objects passed between the stores and the services.

They carry no persistence behaviour; the SQLAlchemy rows in
``eventhub.models`` are converted to and from these at the store boundary.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Generic, TypeVar

T = TypeVar("T")

MAX_PAGE_SIZE = 50


@dataclass
class Event:
    id: uuid.UUID
    title: str
    description: str
    start_at: datetime
    end_at: datetime
    location: str
    category: str | None
    max_participants: int
    image_file_id: str | None = None


@dataclass(frozen=True)
class EventDraft:
    """Mutable fields of an event, as supplied on create and edit."""

    title: str
    description: str
    start_at: datetime
    end_at: datetime
    location: str
    category: str | None
    max_participants: int
    image_file_id: str | None = None


@dataclass(frozen=True)
class Registration:
    id: uuid.UUID
    event_id: uuid.UUID
    user_id: str
    registration_date: date


@dataclass(frozen=True)
class User:
    id: str
    first_name: str
    last_name: str
    birth_date: date


@dataclass(frozen=True)
class Participant:
    """A user as seen through their registration for one event."""

    user_id: str
    first_name: str
    last_name: str
    birth_date: date
    registration_date: date


@dataclass(frozen=True)
class EventSummary:
    id: uuid.UUID
    title: str
    start_at: datetime
    end_at: datetime
    location: str
    category: str | None
    max_participants: int
    current_participants_count: int
    image_file_id: str | None = None


@dataclass(frozen=True)
class EventDetails(EventSummary):
    description: str = ""


@dataclass(frozen=True)
class EventFilters:
    """Listing filters; empty strings and None match every event."""

    title: str | None = None
    location: str | None = None
    category: str | None = None
    on_date: date | None = None

    def matches(self, event: Event) -> bool:
        if self.title and self.title.lower() not in event.title.lower():
            return False
        if self.location and self.location.lower() not in event.location.lower():
            return False
        if self.category and (
            event.category is None or self.category.lower() not in event.category.lower()
        ):
            return False
        if self.on_date is not None and not (
            event.start_at.date() <= self.on_date <= event.end_at.date()
        ):
            return False
        return True


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    total_items_count: int
    page_number: int
    page_size: int
    pages_count: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pages_count", pages_count(self.total_items_count, self.page_size))


def pages_count(total_items_count: int, page_size: int) -> int:
    return math.ceil(total_items_count / page_size)


def summarize(event: Event, participants_count: int) -> EventSummary:
    return EventSummary(
        id=event.id,
        title=event.title,
        start_at=event.start_at,
        end_at=event.end_at,
        location=event.location,
        category=event.category,
        max_participants=event.max_participants,
        current_participants_count=participants_count,
        image_file_id=event.image_file_id,
    )


def detail(event: Event, participants_count: int) -> EventDetails:
    return EventDetails(
        id=event.id,
        title=event.title,
        start_at=event.start_at,
        end_at=event.end_at,
        location=event.location,
        category=event.category,
        max_participants=event.max_participants,
        current_participants_count=participants_count,
        image_file_id=event.image_file_id,
        description=event.description,
    )
