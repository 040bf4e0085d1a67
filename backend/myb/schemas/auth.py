from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class LoginOut(BaseModel):
    token: str
    username: str
    role: str


class Identity(BaseModel):
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
