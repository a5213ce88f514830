from fastapi import APIRouter, Depends, HTTPException, UploadFile
from fastapi.responses import FileResponse

from eventhub.routes.deps import get_file_storage
from eventhub.schemas.files import FileOut
from eventhub.stores.interfaces import FileStorage

router = APIRouter(prefix="/files", tags=["files"])


@router.post("", response_model=FileOut, status_code=201)
async def upload_file(file: UploadFile, files: FileStorage = Depends(get_file_storage)):
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return FileOut(file_id=files.save(file.filename or "", content))


@router.get("/{file_id}")
def get_file(file_id: str, files: FileStorage = Depends(get_file_storage)):
    if not files.exists(file_id):
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(
        files.path_for(file_id),
        media_type="application/octet-stream",
        filename=file_id,
    )
