"""Staff account schemas. `User` is the stored record; `UserResponse` is what leaves the API."""

import enum
from typing import Optional

from pydantic import ConfigDict, Field

from pharmacy.schemas.base import CamelModel, PartialUpdate


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


class UserBase(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.STAFF


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(PartialUpdate):
    non_nullable = ("username", "password", "full_name", "role")

    username: Optional[str] = Field(None, min_length=3, max_length=50)
    password: Optional[str] = Field(None, min_length=6)
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[UserRole] = None


class User(UserBase):
    model_config = ConfigDict(frozen=True)

    id: int
    password: str


class UserResponse(UserBase):
    id: int
