from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

UserType = Literal["admin", "seller", "user"]


class UserRecord(BaseModel):
    """Stored user account, including the password hash."""
    user_id: str = Field(description="Unique user identifier")
    firstname: str = Field(description="First name")
    lastname: str = Field(description="Last name")
    email: str = Field(description="Login email")
    password: str = Field(description="bcrypt password hash")
    user_type: UserType = Field(description="Account role")
