"""
User models.

Users are the console's staff roster. Warehouse staff and store
cashiers are usually bound to one location; admins are not.
"""

from enum import Enum
from typing import Optional
from pydantic import Field, field_validator

from models.base import BaseSchema, TimestampMixin

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRole(str, Enum):
    """Console roles."""
    ADMIN = "Admin"
    WAREHOUSE_STAFF = "Warehouse Staff"
    STORE_CASHIER = "Store Cashier"


class UserCreate(BaseSchema):
    """Create a new user."""

    name: str = Field(..., min_length=1, max_length=200, description="Full name")
    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN, examples=["budi@gudang.id"])
    role: UserRole = Field(..., description="Console role")
    location_id: Optional[int] = Field(None, ge=1, description="Location the user works at")
    is_active: bool = Field(True, description="Inactive users keep their history but cannot sign in")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are compared case-insensitively."""
        return v.lower()


class UserUpdate(BaseSchema):
    """
    Update an existing user.

    All fields optional - only provided fields are updated.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, max_length=254, pattern=EMAIL_PATTERN)
    role: Optional[UserRole] = None
    location_id: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.lower()


class UserResponse(BaseSchema, TimestampMixin):
    """User with the resolved location name."""

    id: int = Field(..., description="User ID")
    name: str
    email: str
    role: UserRole
    location_id: Optional[int] = None
    location_name: Optional[str] = None
    is_active: bool
