from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventhub.core.config import CORS_ORIGINS, LOG_LEVEL
from eventhub.core.logging_config import setup_logging
from eventhub.database.db import Base, engine
from eventhub.models import events, registrations, users  # noqa: F401  (register tables)
from eventhub.routes import events as events_routes
from eventhub.routes import files as files_routes
from eventhub.routes import registrations as registrations_routes
from eventhub.routes import users as users_routes
from eventhub.routes.errors import register_exception_handlers

setup_logging(LOG_LEVEL)

app = FastAPI(title="eventhub")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Create all tables (in production, use migrations such as Alembic)
Base.metadata.create_all(bind=engine)

# Include the routers
app.include_router(events_routes.router)
app.include_router(registrations_routes.router)
app.include_router(users_routes.router)
app.include_router(files_routes.router)
