from pydantic import BaseModel
from typing import Optional
import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    CUSTOMER = "customer"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    """
    Authenticated caller.
    Built from the access token claims; accounts live outside this service.
    """
    id: str
    role: UserRole = UserRole.CUSTOMER
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
