import os

# Keep the application's own engine off the filesystem during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from eventhub.database.db import (
    Base,
    create_db_engine,
    create_session_factory,
    enable_sqlite_foreign_keys,
    get_db,
)
from eventhub.main import app
from eventhub.routes.deps import get_event_lock, get_file_storage
from eventhub.services.catalog import EventCatalog
from eventhub.services.locks import EventLock
from eventhub.services.registrations import RegistrationCoordinator
from eventhub.services.users import UserDirectory
from eventhub.stores.files import LocalFileStorage
from eventhub.stores.memory_store import InMemoryEventStore
from eventhub.stores.sqlalchemy_store import SqlAlchemyEventStore

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal: sessionmaker[Session] = create_session_factory(engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create a fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Session:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sql_store(db_session: Session) -> SqlAlchemyEventStore:
    return SqlAlchemyEventStore(db_session)


@pytest.fixture
def memory_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture(params=["sqlalchemy", "memory"])
def store(request, sql_store, memory_store):
    """Runs the test once against each store implementation."""
    return sql_store if request.param == "sqlalchemy" else memory_store


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def event_lock(fake_redis) -> EventLock:
    return EventLock(fake_redis, timeout=10, blocking_timeout=5)


@pytest.fixture
def file_storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "uploads")


@pytest.fixture
def catalog(store, file_storage) -> EventCatalog:
    return EventCatalog(store, file_storage)


@pytest.fixture
def coordinator(store, event_lock) -> RegistrationCoordinator:
    return RegistrationCoordinator(store, event_lock, today=lambda: date(2026, 10, 17))


@pytest.fixture
def user_directory(store) -> UserDirectory:
    return UserDirectory(store)


@pytest.fixture
def file_session_factory(tmp_path) -> sessionmaker[Session]:
    """Sessions on a file-backed database, one connection per thread."""
    file_engine = create_db_engine(f"sqlite:///{tmp_path / 'eventhub.db'}")
    Base.metadata.create_all(bind=file_engine)
    yield create_session_factory(file_engine)
    file_engine.dispose()


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(event_lock, file_storage):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_lock] = lambda: event_lock
    app.dependency_overrides[get_file_storage] = lambda: file_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
