"""
Shared schema base for request and response models.
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Strings are trimmed, so a name of only spaces fails min_length.
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class TimestampMixin(BaseModel):
    """Row timestamps as Supabase returns them."""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
