from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Any, Dict
from datetime import datetime

from app.core.constants import RoleEnum

class UserBase(BaseModel):
    """Base user schema with common fields."""
    username: str
    full_name: Optional[str] = None
    role: RoleEnum = RoleEnum.STUDENT

class UserCreate(UserBase):
    """Schema for registering a new user, includes password."""
    password: str

    @field_validator("username")
    def username_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Username cannot be empty.")
        return v.strip()

    @field_validator("password")
    def validate_password(cls, v):
        if not v or not v.strip():
            raise ValueError("Password cannot be empty or contain only whitespace.")
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long.")
        return v

class User(UserBase):
    """Main user schema for reading user data."""
    id: int
    meta: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class UserContext(BaseModel):
    """The authenticated caller, resolved from the bearer token."""
    user: User
    role: RoleEnum

    model_config = ConfigDict(from_attributes=True)
