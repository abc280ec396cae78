"""Staff sign-in schemas."""

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Bearer token issued to an admin or coach."""

    access_token: str
    token_type: str = "bearer"
    role: str
