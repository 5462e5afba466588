"""Pydantic schemas for Google sign-in and the current user."""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class GoogleLoginRequest(BaseModel):
    # Missing or empty tokens are rejected by the verifier as a 401.
    token: Optional[str] = Field(None, description="Google ID token")


class UserSummary(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserSummary
