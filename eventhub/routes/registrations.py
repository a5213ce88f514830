import uuid

from fastapi import APIRouter, Depends, Response

from eventhub.routes.deps import get_coordinator
from eventhub.schemas.registrations import ParticipantOut, RegistrationRequest
from eventhub.services.registrations import RegistrationCoordinator

router = APIRouter(prefix="/events/{event_id}", tags=["registrations"])


@router.post("/registrations", status_code=204)
def register(
    event_id: uuid.UUID,
    payload: RegistrationRequest,
    coordinator: RegistrationCoordinator = Depends(get_coordinator),
):
    coordinator.register(event_id, payload.user_id)
    return Response(status_code=204)


@router.delete("/registrations/{user_id}", status_code=204)
def unregister(
    event_id: uuid.UUID,
    user_id: str,
    coordinator: RegistrationCoordinator = Depends(get_coordinator),
):
    coordinator.unregister(event_id, user_id)
    return Response(status_code=204)


@router.get("/participants", response_model=list[ParticipantOut])
def get_participants(
    event_id: uuid.UUID,
    coordinator: RegistrationCoordinator = Depends(get_coordinator),
):
    return coordinator.get_participants(event_id)


@router.get("/participants/{user_id}", response_model=ParticipantOut)
def get_participant(
    event_id: uuid.UUID,
    user_id: str,
    coordinator: RegistrationCoordinator = Depends(get_coordinator),
):
    return coordinator.get_participant(event_id, user_id)
