"""Session provider schemas."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class UserResponse(BaseModel):
    """Current user, as shown on the settings page."""
    id: UUID
    email: Optional[str]
    display_name: Optional[str]

    class Config:
        from_attributes = True
