"""Event catalog: filtered listing and event create/edit."""

import logging
import uuid
from dataclasses import asdict
from datetime import date

from eventhub.core.errors import InvalidArgumentError, NotFoundError
from eventhub.domain.models import (
    MAX_PAGE_SIZE,
    Event,
    EventDetails,
    EventDraft,
    EventFilters,
    EventSummary,
    Page,
    detail,
    summarize,
)
from eventhub.stores.interfaces import EventStore, FileStorage

logger = logging.getLogger(__name__)


class EventCatalog:
    def __init__(self, store: EventStore, files: FileStorage) -> None:
        self._store = store
        self._files = files

    def list_events(
        self,
        title: str | None = None,
        location: str | None = None,
        category: str | None = None,
        on_date: date | None = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Page[EventSummary]:
        """Return one page of events matching every given filter.

        Text filters are case-insensitive substring matches; ``on_date``
        matches events whose start and end days enclose it. Events are
        ordered by start time, then id.

        ``page_number`` must be at least 1 and ``page_size`` between 1 and
        50. The HTTP layer enforces this; other callers get
        ``InvalidArgumentError``.
        """
        if page_number < 1:
            raise InvalidArgumentError("Page number must be at least 1", page_number=page_number)
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"Page size must be between 1 and {MAX_PAGE_SIZE}", page_size=page_size
            )

        filters = EventFilters(title=title, location=location, category=category, on_date=on_date)
        events, total = self._store.query_events(
            filters, skip=(page_number - 1) * page_size, take=page_size
        )
        items = [summarize(event, self._store.count_registrations(event.id)) for event in events]
        return Page(items=items, total_items_count=total, page_number=page_number, page_size=page_size)

    def get_event(self, event_id: uuid.UUID) -> EventDetails:
        event = self._store.find_event(event_id)
        if event is None:
            raise NotFoundError(f"Event with ID:{event_id} doesn't exist", event_id=event_id)
        return detail(event, self._store.count_registrations(event_id))

    def get_user_events(self, user_id: str) -> list[EventSummary]:
        return [
            summarize(event, self._store.count_registrations(event.id))
            for event in self._store.list_user_events(user_id)
        ]

    def _ensure_file_exists(self, file_id: str) -> None:
        if not self._files.exists(file_id):
            raise NotFoundError(f"File with ID:{file_id} doesn't exist", file_id=file_id)

    def create_event(self, draft: EventDraft) -> EventDetails:
        if draft.image_file_id:
            self._ensure_file_exists(draft.image_file_id)

        event = Event(id=uuid.uuid4(), **asdict(draft))
        self._store.insert_event(event)
        logger.info("Created event %s (%s)", event.id, event.title)
        return detail(event, 0)

    def edit_event(self, event_id: uuid.UUID, draft: EventDraft) -> EventDetails:
        """Overwrite every mutable field of an event.

        Lowering ``max_participants`` below the current number of
        registrations is accepted and leaves the event over capacity.
        """
        event = self._store.find_event(event_id)
        if event is None:
            raise NotFoundError(f"Event with ID:{event_id} doesn't exist", event_id=event_id)

        if draft.image_file_id and draft.image_file_id != event.image_file_id:
            self._ensure_file_exists(draft.image_file_id)

        updated = Event(id=event_id, **asdict(draft))
        self._store.update_event(updated)

        count = self._store.count_registrations(event_id)
        if count > updated.max_participants:
            logger.warning(
                "Event %s is over capacity after edit (%d/%d)",
                event_id, count, updated.max_participants,
            )
        logger.info("Updated event %s", event_id)
        return detail(updated, count)
