"""SQLAlchemy implementation of the EventStore."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Date, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from eventhub.core.errors import NotFoundError, UnexpectedError
from eventhub.domain.models import Event, EventFilters, Participant, Registration, User
from eventhub.models.events import Event as EventRow
from eventhub.models.registrations import EVENT_USER_CONSTRAINT
from eventhub.models.registrations import Registration as RegistrationRow
from eventhub.models.users import User as UserRow
from eventhub.stores.interfaces import (
    CapacityExceededError,
    DuplicateRegistrationError,
    DuplicateUserError,
    EventStore,
)

logger = logging.getLogger(__name__)

# SQLite does not report constraint names, only the columns involved
_SQLITE_PAIR_MESSAGE = "registrations.event_id, registrations.user_id"


def _is_event_user_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return EVENT_USER_CONSTRAINT in message or _SQLITE_PAIR_MESSAGE in message


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    return "foreign key" in str(exc.orig).lower()


def _filter_conditions(filters: EventFilters) -> list:
    conditions = []
    if filters.title:
        conditions.append(EventRow.title.icontains(filters.title, autoescape=True))
    if filters.location:
        conditions.append(EventRow.location.icontains(filters.location, autoescape=True))
    if filters.category:
        conditions.append(EventRow.category.is_not(None))
        conditions.append(EventRow.category.icontains(filters.category, autoescape=True))
    if filters.on_date is not None:
        # Calendar-day comparison, the time of day is ignored
        conditions.append(func.date(EventRow.start_at, type_=Date) <= filters.on_date)
        conditions.append(func.date(EventRow.end_at, type_=Date) >= filters.on_date)
    return conditions


def _to_event(row: EventRow) -> Event:
    return Event(
        id=row.id,
        title=row.title,
        description=row.description,
        start_at=row.start_at,
        end_at=row.end_at,
        location=row.location,
        category=row.category,
        max_participants=row.max_participants,
        image_file_id=row.image_file_id,
    )


def _to_registration(row: RegistrationRow) -> Registration:
    return Registration(
        id=row.id,
        event_id=row.event_id,
        user_id=row.user_id,
        registration_date=row.registration_date,
    )


class SqlAlchemyEventStore(EventStore):
    """Relational event store working on one SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    @contextmanager
    def _storage_errors(self, action: str, **context) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("Storage failure while %s", action)
            raise UnexpectedError(f"Storage failure while {action}", **context) from exc

    def find_event(self, event_id: uuid.UUID) -> Event | None:
        with self._storage_errors("loading event", event_id=event_id):
            row = self._db.get(EventRow, event_id, populate_existing=True)
        return _to_event(row) if row else None

    def insert_event(self, event: Event) -> None:
        with self._storage_errors("creating event", event_id=event.id):
            self._db.add(
                EventRow(
                    id=event.id,
                    title=event.title,
                    description=event.description,
                    start_at=event.start_at,
                    end_at=event.end_at,
                    location=event.location,
                    category=event.category,
                    max_participants=event.max_participants,
                    image_file_id=event.image_file_id,
                )
            )
            self._db.commit()

    def update_event(self, event: Event) -> None:
        with self._storage_errors("updating event", event_id=event.id):
            row = self._db.get(EventRow, event.id)
            if row is None:
                raise NotFoundError(f"Event with ID:{event.id} doesn't exist", event_id=event.id)
            row.title = event.title
            row.description = event.description
            row.start_at = event.start_at
            row.end_at = event.end_at
            row.location = event.location
            row.category = event.category
            row.max_participants = event.max_participants
            row.image_file_id = event.image_file_id
            self._db.commit()

    def query_events(self, filters: EventFilters, skip: int, take: int) -> tuple[list[Event], int]:
        conditions = _filter_conditions(filters)
        with self._storage_errors("listing events"):
            total = self._db.scalar(select(func.count()).select_from(EventRow).where(*conditions))
            rows = self._db.scalars(
                select(EventRow)
                .where(*conditions)
                .order_by(EventRow.start_at, EventRow.id)
                .offset(skip)
                .limit(take)
            ).all()
        return [_to_event(row) for row in rows], int(total or 0)

    def count_registrations(self, event_id: uuid.UUID) -> int:
        with self._storage_errors("counting registrations", event_id=event_id):
            count = self._db.scalar(
                select(func.count(RegistrationRow.id)).where(RegistrationRow.event_id == event_id)
            )
        return int(count or 0)

    def find_registration(self, event_id: uuid.UUID, user_id: str) -> Registration | None:
        with self._storage_errors("loading registration", event_id=event_id, user_id=user_id):
            row = self._db.scalar(
                select(RegistrationRow).where(
                    RegistrationRow.event_id == event_id,
                    RegistrationRow.user_id == user_id,
                )
            )
        return _to_registration(row) if row else None

    def list_registrations(self, event_id: uuid.UUID) -> list[Registration]:
        with self._storage_errors("listing registrations", event_id=event_id):
            rows = self._db.scalars(
                select(RegistrationRow)
                .where(RegistrationRow.event_id == event_id)
                .order_by(RegistrationRow.registration_date, RegistrationRow.id)
            ).all()
        return [_to_registration(row) for row in rows]

    def _claim_slot(self, event_id: uuid.UUID) -> int:
        """Lock the event row and check that a slot is free.

        Returns the event's ``max_participants``; the transaction stays open
        holding the lock until the caller commits or rolls back.
        """
        # Row lock on PostgreSQL and friends; SQLite ignores FOR UPDATE
        max_participants = self._db.scalar(
            select(EventRow.max_participants).where(EventRow.id == event_id).with_for_update()
        )
        if max_participants is None:
            self._db.rollback()
            raise NotFoundError(f"Event with ID:{event_id} doesn't exist", event_id=event_id)

        # Same idea as a conditional "booked < capacity" update: the count is
        # read by the writing statement itself, so no other writer can slip in
        events = EventRow.__table__
        taken = (
            select(func.count(RegistrationRow.id))
            .where(RegistrationRow.event_id == event_id)
            .scalar_subquery()
        )
        result = self._db.execute(
            update(events)
            .where(events.c.id == event_id)
            .where(taken < events.c.max_participants)
            .values(max_participants=events.c.max_participants)
        )
        if result.rowcount != 1:
            self._db.rollback()
            raise CapacityExceededError(event_id, max_participants)
        return max_participants

    def insert_registration(self, registration: Registration) -> None:
        context = {"event_id": registration.event_id, "user_id": registration.user_id}
        try:
            self._claim_slot(registration.event_id)
            self._db.add(
                RegistrationRow(
                    id=registration.id,
                    event_id=registration.event_id,
                    user_id=registration.user_id,
                    registration_date=registration.registration_date,
                )
            )
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            if _is_event_user_violation(exc):
                raise DuplicateRegistrationError(registration.event_id, registration.user_id) from exc
            if _is_foreign_key_violation(exc):
                raise NotFoundError(
                    f"User with ID:{registration.user_id} doesn't exist", user_id=registration.user_id
                ) from exc
            logger.exception("Integrity failure while registering")
            raise UnexpectedError("Storage failure while registering", **context) from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("Storage failure while registering")
            raise UnexpectedError("Storage failure while registering", **context) from exc

    def delete_registration(self, registration: Registration) -> None:
        with self._storage_errors(
            "unregistering", event_id=registration.event_id, user_id=registration.user_id
        ):
            self._db.execute(delete(RegistrationRow).where(RegistrationRow.id == registration.id))
            self._db.commit()

    def list_participants(self, event_id: uuid.UUID) -> list[Participant]:
        with self._storage_errors("listing participants", event_id=event_id):
            rows = self._db.execute(
                select(RegistrationRow.registration_date, UserRow)
                .join(UserRow, RegistrationRow.user_id == UserRow.id)
                .where(RegistrationRow.event_id == event_id)
                .order_by(
                    RegistrationRow.registration_date,
                    UserRow.last_name,
                    UserRow.first_name,
                    UserRow.id,
                )
            ).all()
        return [
            Participant(
                user_id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                birth_date=user.birth_date,
                registration_date=registration_date,
            )
            for registration_date, user in rows
        ]

    def list_user_events(self, user_id: str) -> list[Event]:
        with self._storage_errors("listing user events", user_id=user_id):
            rows = self._db.scalars(
                select(EventRow)
                .join(RegistrationRow, RegistrationRow.event_id == EventRow.id)
                .where(RegistrationRow.user_id == user_id)
                .order_by(EventRow.start_at, EventRow.id)
            ).all()
        return [_to_event(row) for row in rows]

    def find_user(self, user_id: str) -> User | None:
        with self._storage_errors("loading user", user_id=user_id):
            row = self._db.get(UserRow, user_id)
        if row is None:
            return None
        return User(id=row.id, first_name=row.first_name, last_name=row.last_name, birth_date=row.birth_date)

    def insert_user(self, user: User) -> None:
        with self._storage_errors("creating user", user_id=user.id):
            if self._db.get(UserRow, user.id) is not None:
                raise DuplicateUserError(user.id)
            self._db.add(
                UserRow(
                    id=user.id,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    birth_date=user.birth_date,
                )
            )
            try:
                self._db.commit()
            except IntegrityError as exc:
                self._db.rollback()
                raise DuplicateUserError(user.id) from exc
