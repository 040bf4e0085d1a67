from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from myb.api.deps import get_settings, upload_identity
from myb.core.config import Settings
from myb.schemas.auth import Identity
from myb.schemas.upload import UploadOut, UploadRequest
from myb.services.uploads import resolve_upload, save_upload

router = APIRouter()


@router.post("/upload", response_model=UploadOut)
def upload(
    payload: UploadRequest,
    _: Identity | None = Depends(upload_identity),
    settings: Settings = Depends(get_settings),
):
    return UploadOut(url=save_upload(payload.filename, payload.data, settings))


@router.get("/uploads/{name}")
def get_upload(name: str, settings: Settings = Depends(get_settings)):
    file_path, media_type = resolve_upload(name, settings)
    return FileResponse(file_path, media_type=media_type)
