from pydantic import BaseModel, ConfigDict, Field, field_validator
from myb.schemas.common import reject_null


class ProgressCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str | None = None
    book_id: str = Field(..., min_length=1)
    current_chapter: int = Field(1, ge=1)


class ProgressUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current_chapter: int | None = Field(None, ge=1)

    @field_validator("current_chapter", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)
