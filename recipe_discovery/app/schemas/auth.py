from typing import Optional

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None


class SignInRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)


class SignUpRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    full_name: str = ""


class AuthSession(BaseModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user_id: Optional[str] = None
    email: Optional[str] = None


class AuthMessage(BaseModel):
    success: bool = True
    message: str


class OAuthRedirect(BaseModel):
    provider: str
    url: str
