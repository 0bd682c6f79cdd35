"""
User model for the cached, logged-in user.
"""

from pydantic import BaseModel, Field
from typing import Optional, Union


ADMIN_ROLE = "admin"


class User(BaseModel):
    """Logged-in user as written to local storage by the login flow."""
    id: Optional[Union[int, str]] = Field(None, description="Backend user id")
    name: str = Field("", description="Display name")
    role: str = Field("citizen", description="citizen | officer | admin")
    department: Optional[str] = Field(None, description="Department (admins/officers)")

    class Config:
        extra = "ignore"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
