"""User profiles that registrations refer to."""

import logging

from eventhub.core.errors import NotFoundError, Rule, RuleViolationError
from eventhub.domain.models import User
from eventhub.stores.interfaces import DuplicateUserError, EventStore

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, store: EventStore) -> None:
        self._store = store

    def create_user(self, user: User) -> User:
        if self._store.find_user(user.id) is not None:
            raise RuleViolationError(Rule.USER_EXISTS, user_id=user.id)
        try:
            self._store.insert_user(user)
        except DuplicateUserError as exc:
            raise RuleViolationError(Rule.USER_EXISTS, user_id=user.id) from exc
        logger.info("Created user %s", user.id)
        return user

    def get_user(self, user_id: str) -> User:
        user = self._store.find_user(user_id)
        if user is None:
            raise NotFoundError(f"User with ID:{user_id} doesn't exist", user_id=user_id)
        return user
