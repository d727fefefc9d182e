"""Authentication-related request and response schemas."""

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    """Payload for user login."""

    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"


class AuthUserResponse(BaseModel):
    """Current actor as seen by the API."""

    id: int
    username: str
    full_name: str | None = None
    role: str

    model_config = ConfigDict(from_attributes=True)
