from pydantic import BaseModel, ConfigDict, Field, field_validator
from myb.schemas.common import reject_null


def count_words(content: str) -> int:
    return len(content.split())


class ChapterCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    book_id: str = Field(..., min_length=1)
    chapter_number: int = Field(1, ge=0)
    title: str = ""
    content: str = ""
    word_count: int | None = Field(None, ge=0)


class ChapterUpdate(BaseModel):
    """A null word_count asks for it to be recounted from the content."""

    model_config = ConfigDict(extra="ignore")

    book_id: str | None = Field(None, min_length=1)
    chapter_number: int | None = Field(None, ge=0)
    title: str | None = None
    content: str | None = None
    word_count: int | None = Field(None, ge=0)

    @field_validator("book_id", "chapter_number", "title", "content", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)
