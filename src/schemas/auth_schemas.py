from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

_EMAIL_HINT = "email must be valid"


class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email", mode="wrap")
    @classmethod
    def check_email(cls, value, handler):
        if isinstance(value, str):
            value = value.strip()
        try:
            return handler(value)
        except ValidationError as e:
            raise ValueError(_EMAIL_HINT) from e

# Input
class SignupRequest(Credentials):
    pass

class LoginRequest(Credentials):
    pass

# Output
class AuthUserResponse(BaseModel):
    id: str
    email: str
    created_at: Optional[datetime] = None

class LoginUserResponse(BaseModel):
    id: str
    email: str

class SignupResponse(BaseModel):
    user: AuthUserResponse
    access_token: str
    refresh_token: str

class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    user: LoginUserResponse
