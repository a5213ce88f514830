"""
Test the user directory.
"""
import pytest

from eventhub.core.errors import NotFoundError, Rule, RuleViolationError
from factories import build_event, build_user


class TestUserDirectory:
    def test_create_and_get_user(self, user_directory, store):
        user = build_user("u1", first_name="Grace", last_name="Hopper")

        created = user_directory.create_user(user)

        assert created == user
        assert store.find_user("u1") == user
        assert user_directory.get_user("u1") == user

    def test_create_existing_user_fails(self, user_directory):
        user_directory.create_user(build_user("u1"))

        with pytest.raises(RuleViolationError) as exc_info:
            user_directory.create_user(build_user("u1", first_name="Other"))

        assert exc_info.value.rule is Rule.USER_EXISTS
        assert user_directory.get_user("u1").first_name == "Alex"

    def test_get_missing_user(self, user_directory):
        with pytest.raises(NotFoundError) as exc_info:
            user_directory.get_user("nobody")

        assert exc_info.value.context == {"user_id": "nobody"}

    def test_created_user_can_register(self, user_directory, coordinator, store):
        """A user created here shows up in the participant list."""
        event = build_event()
        store.insert_event(event)
        user_directory.create_user(build_user("u1", first_name="Grace"))

        coordinator.register(event.id, "u1")

        assert [p.first_name for p in coordinator.get_participants(event.id)] == ["Grace"]
        assert coordinator.get_participant(event.id, "u1").user_id == "u1"
