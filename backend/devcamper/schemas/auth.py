"""
DevCamper API - Auth Schemas
============================

What:  Register/login request bodies and the User response DTO.
How:   Login fields are optional at the schema level so that a missing email
       or password reaches the service and gets the API's own 400 message
       ("Please provide an email and password").
"""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from devcamper.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: Literal["user", "publisher"] = "user"


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(CamelModel):
    success: bool = True
    token: str


class UserResponse(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    role: str
    created_at: datetime

    model_config = {**CamelModel.model_config, "from_attributes": True}
