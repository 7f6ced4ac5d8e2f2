from permitpro.schemas.base import CamelModel


class LoginRequest(CamelModel):
    email: str
    password: str | None = None


class LoginResponse(CamelModel):
    name: str
    role: str
