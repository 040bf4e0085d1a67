from pydantic import BaseModel, ConfigDict, Field, field_validator
from myb.schemas.common import reject_null, strip_required


def clean_tags(value: list[str]) -> list[str]:
    return list(dict.fromkeys(tag.strip() for tag in value if tag.strip()))


class BookFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    author: str = ""
    genre: str | None = None
    price: float = Field(0.0, ge=0)
    synopsis: str = ""
    cover_url: str = ""
    pdf_url: str = ""
    published: bool = False
    featured: bool = False
    reads: int = Field(0, ge=0)
    likes: int = Field(0, ge=0)
    rating: float = Field(0.0, ge=0, le=5)
    tags: list[str] = Field(default_factory=list)
    status: str | None = None
    published_date: str | None = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, value: list[str]) -> list[str]:
        return clean_tags(value)


class BookCreate(BookFields):
    title: str = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return strip_required(value)


class BookUpdate(BaseModel):
    """Partial book edit. Only genre, status and published_date may be cleared with null."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    author: str | None = None
    genre: str | None = None
    price: float | None = Field(None, ge=0)
    synopsis: str | None = None
    cover_url: str | None = None
    pdf_url: str | None = None
    published: bool | None = None
    featured: bool | None = None
    reads: int | None = Field(None, ge=0)
    likes: int | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0, le=5)
    tags: list[str] | None = None
    status: str | None = None
    published_date: str | None = None

    @field_validator(
        "title", "author", "price", "synopsis", "cover_url", "pdf_url",
        "published", "featured", "reads", "likes", "rating", "tags",
        mode="before",
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return strip_required(value)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, value: list[str]) -> list[str]:
        return clean_tags(value)
