"""
Registration of users to events.

Admission for one event is serialized by ``EventLock``: the registration
lookup, the participant count and the insert all run while the lock is
held, so the count compared against ``max_participants`` is never older
than the insert. The store repeats both checks atomically at insert time,
which covers a lock that expired mid-request: a taken (event, user) pair
surfaces as ``Rule.ALREADY_REGISTERED`` and a full event as
``Rule.CAPACITY_REACHED``.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import date

from eventhub.core.errors import NotFoundError, Rule, RuleViolationError
from eventhub.domain.models import Event, Participant, Registration
from eventhub.services.locks import EventLock
from eventhub.stores.interfaces import CapacityExceededError, DuplicateRegistrationError, EventStore

logger = logging.getLogger(__name__)


class RegistrationCoordinator:
    def __init__(
        self,
        store: EventStore,
        lock: EventLock,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._lock = lock
        self._today = today

    def _get_event(self, event_id: uuid.UUID) -> Event:
        event = self._store.find_event(event_id)
        if event is None:
            raise NotFoundError(f"Event with ID:{event_id} doesn't exist", event_id=event_id)
        return event

    def _ensure_user_exists(self, user_id: str) -> None:
        if self._store.find_user(user_id) is None:
            raise NotFoundError(f"User with ID:{user_id} doesn't exist", user_id=user_id)

    def register(self, event_id: uuid.UUID, user_id: str) -> None:
        """Register a user for an event.

        Raises:
            NotFoundError: If the event or the user does not exist.
            RuleViolationError: If the user is already registered or the
                event is full.
        """
        self._get_event(event_id)
        self._ensure_user_exists(user_id)

        with self._lock.hold(event_id):
            # Re-read under the lock, capacity may have been edited meanwhile
            event = self._get_event(event_id)

            if self._store.find_registration(event_id, user_id) is not None:
                logger.info("User %s already registered for event %s", user_id, event_id)
                raise RuleViolationError(Rule.ALREADY_REGISTERED, event_id=event_id, user_id=user_id)

            count = self._store.count_registrations(event_id)
            if count >= event.max_participants:
                logger.info(
                    "Event %s is full (%d/%d), rejected user %s",
                    event_id, count, event.max_participants, user_id,
                )
                raise RuleViolationError(Rule.CAPACITY_REACHED, event_id=event_id, user_id=user_id)

            registration = Registration(
                id=uuid.uuid4(),
                event_id=event_id,
                user_id=user_id,
                registration_date=self._today(),
            )
            try:
                self._store.insert_registration(registration)
            except DuplicateRegistrationError as exc:
                logger.info("Duplicate registration of user %s for event %s", user_id, event_id)
                raise RuleViolationError(
                    Rule.ALREADY_REGISTERED, event_id=event_id, user_id=user_id
                ) from exc
            except CapacityExceededError as exc:
                # Only reachable when the lock expired and another request took the slot
                logger.warning("Event %s filled up at insert, rejected user %s", event_id, user_id)
                raise RuleViolationError(
                    Rule.CAPACITY_REACHED, event_id=event_id, user_id=user_id
                ) from exc

        logger.info("User %s registered for event %s", user_id, event_id)

    def unregister(self, event_id: uuid.UUID, user_id: str) -> None:
        """Remove a user's registration for an event.

        Raises:
            NotFoundError: If the event does not exist.
            RuleViolationError: If the user is not registered.
        """
        self._get_event(event_id)

        with self._lock.hold(event_id):
            registration = self._store.find_registration(event_id, user_id)
            if registration is None:
                raise RuleViolationError(Rule.NOT_REGISTERED, event_id=event_id, user_id=user_id)
            self._store.delete_registration(registration)

        logger.info("User %s unregistered from event %s", user_id, event_id)

    def get_participants(self, event_id: uuid.UUID) -> list[Participant]:
        self._get_event(event_id)
        return self._store.list_participants(event_id)

    def get_participant(self, event_id: uuid.UUID, user_id: str) -> Participant:
        self._get_event(event_id)
        registration = self._store.find_registration(event_id, user_id)
        user = self._store.find_user(user_id) if registration else None
        if registration is None or user is None:
            raise NotFoundError(
                f"User with ID:{user_id} is not registered for event with ID:{event_id}",
                event_id=event_id,
                user_id=user_id,
            )
        return Participant(
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            birth_date=user.birth_date,
            registration_date=registration.registration_date,
        )
