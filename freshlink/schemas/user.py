# File: freshlink/schemas/user.py

from enum import Enum
from typing import Annotated, Optional

from pydantic import EmailStr, StringConstraints

from freshlink.schemas.base import CamelModel


class Role(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"


# Kept exactly as typed; CamelModel strips every other string.
Password = Annotated[str, StringConstraints(strip_whitespace=False)]


class LoginPayload(CamelModel):
    # Empty credentials are rejected by the auth service, not the parser,
    # so the client gets the same 401 shape as for a bad password.
    email: str = ""
    password: Password = ""
    # Unknown roles get a 401 from the auth service.
    role: str = ""


class SignupPayload(CamelModel):
    email: EmailStr
    password: Password = ""
    role: Role
    display_name: Optional[str] = None


class UserRecord(CamelModel):
    id: str
    email: str
    password: Password  # plaintext, demo accounts only
    role: Role
    display_name: str


class AuthenticatedUser(CamelModel):
    id: str
    display_name: str
    role: Role


class AuthResponse(CamelModel):
    message: str
    role: Role
    user_id: str
    display_name: str
    redirect_to: str
