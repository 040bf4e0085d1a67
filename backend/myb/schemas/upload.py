from pydantic import BaseModel


class UploadRequest(BaseModel):
    filename: str | None = None
    data: str | None = None


class UploadOut(BaseModel):
    url: str
