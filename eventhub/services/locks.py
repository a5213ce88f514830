import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import redis
from redis.lock import Lock

from eventhub.core.errors import EventBusyError, UnexpectedError
from eventhub.core.redis_config import EVENT_LOCK_TIMEOUT, EVENT_LOCK_WAIT

logger = logging.getLogger(__name__)


class EventLock:
    """
    Redis lock per event, so only one admission decision for an event runs
    at a time across every worker sharing the Redis server.

    The lock expires after ``timeout`` seconds. Capacity does not depend on
    it alone: the store re-checks the free slot when it inserts.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        *,
        timeout: float = EVENT_LOCK_TIMEOUT,
        blocking_timeout: float = EVENT_LOCK_WAIT,
    ) -> None:
        self._redis = redis_client
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    @staticmethod
    def key_for(event_id: uuid.UUID) -> str:
        return f"event_lock:{event_id}"

    @contextmanager
    def hold(self, event_id: uuid.UUID) -> Iterator[None]:
        lock = self._redis.lock(
            self.key_for(event_id),
            timeout=self.timeout,
            blocking_timeout=self.blocking_timeout,
        )
        try:
            # Acquire the lock - only one request per event can proceed at a time
            acquired = lock.acquire(blocking=True)
        except redis.exceptions.RedisError as exc:
            logger.exception("Lock service unavailable")
            raise UnexpectedError("Lock service unavailable", event_id=event_id) from exc
        if not acquired:
            logger.warning("Timed out waiting for lock on event %s", event_id)
            raise EventBusyError("Event is busy, please try again", event_id=event_id)

        try:
            yield
        finally:
            # Always release the lock
            self._release(lock, event_id)

    def _release(self, lock: Lock, event_id: uuid.UUID) -> None:
        # The work under the lock is already committed or rolled back, so a
        # failed release only means the key is left to expire
        try:
            lock.release()
        except redis.exceptions.LockError:
            logger.warning("Lock on event %s expired before it was released", event_id)
        except redis.exceptions.RedisError:
            logger.exception("Could not release lock on event %s", event_id)
