import threading
import uuid
from dataclasses import replace

from eventhub.core.errors import NotFoundError
from eventhub.domain.models import Event, EventFilters, Participant, Registration, User
from eventhub.stores.interfaces import (
    CapacityExceededError,
    DuplicateRegistrationError,
    DuplicateUserError,
    EventStore,
)


class InMemoryEventStore(EventStore):
    """Thread-safe in-process event store (useful for tests and local runs).

    Existence, the (event, user) pair and capacity are all checked inside
    ``insert_registration`` under the store lock, the way the relational
    store's constraints and conditional insert behave.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: dict[uuid.UUID, Event] = {}
        self._registrations: dict[tuple[uuid.UUID, str], Registration] = {}
        self._users: dict[str, User] = {}

    def find_event(self, event_id: uuid.UUID) -> Event | None:
        with self._lock:
            event = self._events.get(event_id)
            return replace(event) if event else None

    def insert_event(self, event: Event) -> None:
        with self._lock:
            self._events[event.id] = replace(event)

    def update_event(self, event: Event) -> None:
        with self._lock:
            if event.id not in self._events:
                raise NotFoundError(f"Event with ID:{event.id} doesn't exist", event_id=event.id)
            self._events[event.id] = replace(event)

    def query_events(self, filters: EventFilters, skip: int, take: int) -> tuple[list[Event], int]:
        with self._lock:
            matching = sorted(
                (event for event in self._events.values() if filters.matches(event)),
                key=lambda event: (event.start_at, event.id),
            )
        return [replace(event) for event in matching[skip:skip + take]], len(matching)

    def _count(self, event_id: uuid.UUID) -> int:
        return sum(1 for key in self._registrations if key[0] == event_id)

    def count_registrations(self, event_id: uuid.UUID) -> int:
        with self._lock:
            return self._count(event_id)

    def find_registration(self, event_id: uuid.UUID, user_id: str) -> Registration | None:
        with self._lock:
            return self._registrations.get((event_id, user_id))

    def list_registrations(self, event_id: uuid.UUID) -> list[Registration]:
        with self._lock:
            registrations = [r for r in self._registrations.values() if r.event_id == event_id]
        return sorted(registrations, key=lambda r: (r.registration_date, r.id))

    def insert_registration(self, registration: Registration) -> None:
        key = (registration.event_id, registration.user_id)
        with self._lock:
            event = self._events.get(registration.event_id)
            if event is None:
                raise NotFoundError(
                    f"Event with ID:{registration.event_id} doesn't exist", event_id=registration.event_id
                )
            if registration.user_id not in self._users:
                raise NotFoundError(
                    f"User with ID:{registration.user_id} doesn't exist", user_id=registration.user_id
                )
            if key in self._registrations:
                raise DuplicateRegistrationError(registration.event_id, registration.user_id)
            if self._count(registration.event_id) >= event.max_participants:
                raise CapacityExceededError(registration.event_id, event.max_participants)
            self._registrations[key] = registration

    def delete_registration(self, registration: Registration) -> None:
        with self._lock:
            self._registrations.pop((registration.event_id, registration.user_id), None)

    def list_participants(self, event_id: uuid.UUID) -> list[Participant]:
        with self._lock:
            participants = [
                Participant(
                    user_id=user.id,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    birth_date=user.birth_date,
                    registration_date=registration.registration_date,
                )
                for (registered_event_id, user_id), registration in self._registrations.items()
                if registered_event_id == event_id and (user := self._users.get(user_id))
            ]
        return sorted(
            participants,
            key=lambda p: (p.registration_date, p.last_name, p.first_name, p.user_id),
        )

    def list_user_events(self, user_id: str) -> list[Event]:
        with self._lock:
            events = [
                replace(self._events[event_id])
                for event_id, registered_user_id in self._registrations
                if registered_user_id == user_id and event_id in self._events
            ]
        return sorted(events, key=lambda event: (event.start_at, event.id))

    def find_user(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def insert_user(self, user: User) -> None:
        with self._lock:
            if user.id in self._users:
                raise DuplicateUserError(user.id)
            self._users[user.id] = user
