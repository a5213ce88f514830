"""
Test registration service functions.
"""
import uuid
from datetime import date

import pytest

from eventhub.core.errors import EventBusyError, NotFoundError, Rule, RuleViolationError
from eventhub.domain.models import Participant
from eventhub.services.locks import EventLock
from eventhub.services.registrations import RegistrationCoordinator
from factories import build_event, build_user, ensure_user


@pytest.fixture
def event(store):
    event = build_event(max_participants=3)
    store.insert_event(event)
    for user_id in ("alice", "bob", "carol", "dave"):
        store.insert_user(build_user(user_id, first_name=user_id.title()))
    return event


class TestRegister:
    """Test registering users for events."""

    def test_register_success(self, coordinator, store, event):
        coordinator.register(event.id, "alice")

        registration = store.find_registration(event.id, "alice")
        assert registration is not None
        assert registration.registration_date == date(2026, 10, 17)
        assert store.count_registrations(event.id) == 1

    def test_register_twice_fails_second_time(self, coordinator, store, event):
        coordinator.register(event.id, "alice")

        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.register(event.id, "alice")

        assert exc_info.value.rule is Rule.ALREADY_REGISTERED
        assert exc_info.value.context == {"event_id": str(event.id), "user_id": "alice"}
        assert store.count_registrations(event.id) == 1

    def test_register_for_missing_event(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.register(uuid.uuid4(), "alice")

    def test_register_unknown_user(self, coordinator, store, event):
        with pytest.raises(NotFoundError) as exc_info:
            coordinator.register(event.id, "stranger")

        assert exc_info.value.context == {"user_id": "stranger"}
        assert store.count_registrations(event.id) == 0

    def test_store_capacity_check_becomes_capacity_reached(self, coordinator, store, event, monkeypatch):
        """A stale count that lets the request through is caught at insert."""
        for user_id in ("alice", "bob", "carol"):
            coordinator.register(event.id, user_id)
        monkeypatch.setattr(store, "count_registrations", lambda event_id: 0)

        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.register(event.id, "dave")

        assert exc_info.value.rule is Rule.CAPACITY_REACHED
        assert store.find_registration(event.id, "dave") is None

    def test_register_last_slot_then_full(self, coordinator, store, event):
        """Test booking the last available slot."""
        for user_id in ("alice", "bob", "carol"):
            coordinator.register(event.id, user_id)

        # Next registration should fail
        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.register(event.id, "dave")

        assert exc_info.value.rule is Rule.CAPACITY_REACHED
        assert store.count_registrations(event.id) == 3

    def test_duplicate_is_reported_before_capacity(self, coordinator, event):
        for user_id in ("alice", "bob", "carol"):
            coordinator.register(event.id, user_id)

        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.register(event.id, "alice")

        assert exc_info.value.rule is Rule.ALREADY_REGISTERED

    def test_single_slot_scenario(self, coordinator, store):
        """A takes the only slot, B is refused, A leaves, B gets in."""
        event = build_event(max_participants=1)
        store.insert_event(event)
        ensure_user(store, "A")
        ensure_user(store, "B")

        coordinator.register(event.id, "A")
        assert store.count_registrations(event.id) == 1

        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.register(event.id, "B")
        assert exc_info.value.rule is Rule.CAPACITY_REACHED

        coordinator.unregister(event.id, "A")
        coordinator.register(event.id, "B")

        assert store.find_registration(event.id, "A") is None
        assert store.find_registration(event.id, "B") is not None

    def test_register_unregister_register_round_trip(self, coordinator, store, event):
        coordinator.register(event.id, "alice")
        coordinator.unregister(event.id, "alice")
        coordinator.register(event.id, "alice")

        assert store.count_registrations(event.id) == 1

    def test_over_capacity_event_refuses_new_registrations(self, coordinator, store, event):
        for user_id in ("alice", "bob", "carol"):
            coordinator.register(event.id, user_id)
        store.update_event(build_event(id=event.id, max_participants=1))

        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.register(event.id, "dave")

        assert exc_info.value.rule is Rule.CAPACITY_REACHED
        assert store.count_registrations(event.id) == 3

    def test_insert_conflict_becomes_already_registered(self, coordinator, store, event, monkeypatch):
        """A duplicate that slips past the lookup is caught by the store's uniqueness check."""
        coordinator.register(event.id, "alice")
        monkeypatch.setattr(store, "find_registration", lambda event_id, user_id: None)

        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.register(event.id, "alice")

        assert exc_info.value.rule is Rule.ALREADY_REGISTERED
        assert isinstance(exc_info.value.__cause__, Exception)

    def test_busy_event_lock_raises(self, store, event, fake_redis):
        coordinator = RegistrationCoordinator(store, EventLock(fake_redis, timeout=10, blocking_timeout=0.2))
        held = fake_redis.lock(EventLock.key_for(event.id), timeout=10)
        assert held.acquire(blocking=False)

        try:
            with pytest.raises(EventBusyError):
                coordinator.register(event.id, "alice")
        finally:
            held.release()

        assert store.count_registrations(event.id) == 0


class TestUnregister:
    def test_unregister_success(self, coordinator, store, event):
        coordinator.register(event.id, "alice")

        coordinator.unregister(event.id, "alice")

        assert store.find_registration(event.id, "alice") is None

    def test_unregister_when_not_registered(self, coordinator, event):
        with pytest.raises(RuleViolationError) as exc_info:
            coordinator.unregister(event.id, "alice")

        assert exc_info.value.rule is Rule.NOT_REGISTERED

    def test_unregister_missing_event(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.unregister(uuid.uuid4(), "alice")

    def test_unregister_frees_a_slot(self, coordinator, store, event):
        for user_id in ("alice", "bob", "carol"):
            coordinator.register(event.id, user_id)

        coordinator.unregister(event.id, "bob")
        coordinator.register(event.id, "dave")

        assert store.count_registrations(event.id) == 3


class TestParticipants:
    def test_get_participants(self, coordinator, event):
        coordinator.register(event.id, "bob")
        coordinator.register(event.id, "alice")

        participants = coordinator.get_participants(event.id)

        assert [p.user_id for p in participants] == ["alice", "bob"]
        assert participants[0] == Participant(
            user_id="alice",
            first_name="Alice",
            last_name="Useralice",
            birth_date=date(1990, 5, 17),
            registration_date=date(2026, 10, 17),
        )

    def test_get_participants_missing_event(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.get_participants(uuid.uuid4())

    def test_get_participant(self, coordinator, event):
        coordinator.register(event.id, "carol")

        participant = coordinator.get_participant(event.id, "carol")

        assert participant.first_name == "Carol"
        assert participant.registration_date == date(2026, 10, 17)

    def test_get_participant_not_registered(self, coordinator, event):
        with pytest.raises(NotFoundError):
            coordinator.get_participant(event.id, "alice")

    def test_get_participant_missing_event(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.get_participant(uuid.uuid4(), "alice")
