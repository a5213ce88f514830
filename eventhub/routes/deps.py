from functools import lru_cache

import redis
from fastapi import Depends
from sqlalchemy.orm import Session

from eventhub.core.config import get_uploads_dir
from eventhub.core.redis_config import get_redis_client
from eventhub.database.db import get_db
from eventhub.services.catalog import EventCatalog
from eventhub.services.locks import EventLock
from eventhub.services.registrations import RegistrationCoordinator
from eventhub.services.users import UserDirectory
from eventhub.stores.files import LocalFileStorage
from eventhub.stores.interfaces import EventStore, FileStorage
from eventhub.stores.sqlalchemy_store import SqlAlchemyEventStore


@lru_cache(maxsize=1)
def _shared_redis() -> redis.Redis:
    return get_redis_client()


def get_store(db: Session = Depends(get_db)) -> EventStore:
    return SqlAlchemyEventStore(db)


def get_file_storage() -> FileStorage:
    return LocalFileStorage(get_uploads_dir())


def get_event_lock() -> EventLock:
    return EventLock(_shared_redis())


def get_catalog(
    store: EventStore = Depends(get_store),
    files: FileStorage = Depends(get_file_storage),
) -> EventCatalog:
    return EventCatalog(store, files)


def get_coordinator(
    store: EventStore = Depends(get_store),
    lock: EventLock = Depends(get_event_lock),
) -> RegistrationCoordinator:
    return RegistrationCoordinator(store, lock)


def get_user_directory(store: EventStore = Depends(get_store)) -> UserDirectory:
    return UserDirectory(store)
