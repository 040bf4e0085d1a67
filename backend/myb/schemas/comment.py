from pydantic import BaseModel, ConfigDict, Field, field_validator


class CommentCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    book_id: str = Field(..., min_length=1)
    comment: str

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("comment cannot be empty")
        return value
