import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query

from eventhub.domain.models import MAX_PAGE_SIZE
from eventhub.routes.deps import get_catalog
from eventhub.schemas.events import EventCreate, EventOut, EventPageOut, EventUpdate
from eventhub.services.catalog import EventCatalog

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventPageOut)
def list_events(
    title: str | None = None,
    location: str | None = None,
    category: str | None = None,
    on_date: date | None = Query(default=None, alias="date"),
    page_number: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    catalog: EventCatalog = Depends(get_catalog),
):
    return catalog.list_events(
        title=title,
        location=location,
        category=category,
        on_date=on_date,
        page_number=page_number,
        page_size=page_size,
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: uuid.UUID, catalog: EventCatalog = Depends(get_catalog)):
    return catalog.get_event(event_id)


@router.post("", response_model=EventOut, status_code=201)
def create_event(payload: EventCreate, catalog: EventCatalog = Depends(get_catalog)):
    return catalog.create_event(payload.to_draft())


@router.put("/{event_id}", response_model=EventOut)
def edit_event(
    event_id: uuid.UUID,
    payload: EventUpdate,
    catalog: EventCatalog = Depends(get_catalog),
):
    return catalog.edit_event(event_id, payload.to_draft())
