import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta

from eventhub.domain.models import Event, User

BASE_START = datetime(2026, 11, 2, 10, 0)


def build_event(**overrides) -> Event:
    """Return an unsaved event with sensible defaults."""
    start_at = overrides.pop("start_at", BASE_START)
    event = Event(
        id=uuid.uuid4(),
        title="Community Meetup",
        description="Monthly meetup of the local Python group",
        start_at=start_at,
        end_at=overrides.pop("end_at", start_at + timedelta(hours=3)),
        location="Berlin",
        category=None,
        max_participants=10,
        image_file_id=None,
    )
    return replace(event, **overrides)


def build_user(user_id: str, **overrides) -> User:
    user = User(id=user_id, first_name="Alex", last_name=f"User{user_id}", birth_date=date(1990, 5, 17))
    return replace(user, **overrides)


def ensure_user(store, user_id: str) -> None:
    """Registrations need a user row, so create a default one if missing."""
    if store.find_user(user_id) is None:
        store.insert_user(build_user(user_id))
