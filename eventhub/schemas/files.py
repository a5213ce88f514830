from pydantic import BaseModel


class FileOut(BaseModel):
    file_id: str
