from fastapi import APIRouter, Depends

from eventhub.routes.deps import get_catalog, get_user_directory
from eventhub.schemas.events import EventSummaryOut
from eventhub.schemas.users import UserCreate, UserOut
from eventhub.services.catalog import EventCatalog
from eventhub.services.users import UserDirectory

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, users: UserDirectory = Depends(get_user_directory)):
    return users.create_user(payload.to_user())


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, users: UserDirectory = Depends(get_user_directory)):
    return users.get_user(user_id)


@router.get("/{user_id}/events", response_model=list[EventSummaryOut])
def get_user_events(user_id: str, catalog: EventCatalog = Depends(get_catalog)):
    """Events the user is registered for."""
    return catalog.get_user_events(user_id)
