"""Store interfaces (repository pattern).

Services depend only on these; the SQLAlchemy and in-memory stores are
interchangeable and both return domain models.
"""

import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from eventhub.domain.models import Event, EventFilters, Participant, Registration, User


class DuplicateRegistrationError(Exception):
    """Raised by ``insert_registration`` when the (event, user) pair already exists."""

    def __init__(self, event_id: uuid.UUID, user_id: str) -> None:
        super().__init__(f"Registration for event {event_id} and user {user_id} already exists")
        self.event_id = event_id
        self.user_id = user_id


class CapacityExceededError(Exception):
    """Raised by ``insert_registration`` when the event is already full."""

    def __init__(self, event_id: uuid.UUID, max_participants: int) -> None:
        super().__init__(f"Event {event_id} already has {max_participants} participants")
        self.event_id = event_id
        self.max_participants = max_participants


class DuplicateUserError(Exception):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User {user_id} already exists")
        self.user_id = user_id


class EventStore(ABC):
    """Persistence operations for events, registrations and user profiles."""

    @abstractmethod
    def find_event(self, event_id: uuid.UUID) -> Event | None:
        ...

    @abstractmethod
    def insert_event(self, event: Event) -> None:
        ...

    @abstractmethod
    def update_event(self, event: Event) -> None:
        """Overwrite every mutable field of an existing event."""
        ...

    @abstractmethod
    def query_events(self, filters: EventFilters, skip: int, take: int) -> tuple[list[Event], int]:
        """Return one slice of the matching events and the total match count.

        Events are ordered by ``start_at`` then ``id``. The total ignores
        ``skip`` and ``take``.
        """
        ...

    @abstractmethod
    def count_registrations(self, event_id: uuid.UUID) -> int:
        ...

    @abstractmethod
    def find_registration(self, event_id: uuid.UUID, user_id: str) -> Registration | None:
        ...

    @abstractmethod
    def list_registrations(self, event_id: uuid.UUID) -> list[Registration]:
        ...

    @abstractmethod
    def insert_registration(self, registration: Registration) -> None:
        """Persist a registration if the event still has a free slot.

        The capacity check and the insert are one atomic step, so the count
        cannot go past ``max_participants`` whatever the caller did before.

        Raises:
            NotFoundError: If the event or the user does not exist.
            DuplicateRegistrationError: If the (event, user) pair is taken.
            CapacityExceededError: If the event is full.
        """
        ...

    @abstractmethod
    def delete_registration(self, registration: Registration) -> None:
        ...

    @abstractmethod
    def list_participants(self, event_id: uuid.UUID) -> list[Participant]:
        """Return participants ordered by registration date, then last name."""
        ...

    @abstractmethod
    def list_user_events(self, user_id: str) -> list[Event]:
        """Return events the user is registered for, ordered by ``start_at``."""
        ...

    @abstractmethod
    def find_user(self, user_id: str) -> User | None:
        ...

    @abstractmethod
    def insert_user(self, user: User) -> None:
        """Raises ``DuplicateUserError`` if the id is taken."""
        ...


class FileStorage(ABC):
    """Storage for uploaded event images."""

    @abstractmethod
    def exists(self, file_id: str) -> bool:
        ...

    @abstractmethod
    def save(self, filename: str, content: bytes) -> str:
        """Store the content and return the generated file id."""
        ...

    @abstractmethod
    def path_for(self, file_id: str) -> Path:
        ...
