from datetime import date

from pydantic import BaseModel, Field


class RegistrationRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)


class ParticipantOut(BaseModel):
    user_id: str
    first_name: str
    last_name: str
    birth_date: date
    registration_date: date

    class Config:
        from_attributes = True
