from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    # stored as given; there is no hashing in this service
    password: str = Field(..., min_length=1)
