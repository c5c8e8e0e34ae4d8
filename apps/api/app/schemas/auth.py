from pydantic import Field

from app.schemas.common import ApiModel


class LoginRequest(ApiModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(ApiModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class SessionResponse(ApiModel):
    username: str
    expires_at: int
