from datetime import date

from pydantic import BaseModel, Field

from eventhub.domain.models import User


class UserCreate(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    birth_date: date

    def to_user(self) -> User:
        return User(**self.model_dump())


class UserOut(BaseModel):
    id: str
    first_name: str
    last_name: str
    birth_date: date

    class Config:
        from_attributes = True
