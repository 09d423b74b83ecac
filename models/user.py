from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    ADMIN = "Admin"
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    RECEPTIONIST = "Receptionist"
    WARD_BOY = "WardBoy"
    BILLING_STAFF = "BillingStaff"


def parse_role(value) -> Optional[Role]:
    """Map a role string from the API to a Role; unknown strings give None."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except (ValueError, TypeError):
        return None


class SessionUser(BaseModel):
    """The logged-in account as returned by the auth endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: Optional[int] = None
    username: str
    full_name: Optional[str] = None
    role: str
    # Foreign reference into the role's staff table (doctor_id, nurse_id, ...)
    linked_staff_id: Optional[int] = Field(None, alias="linkedStaffId")

    @property
    def display_name(self) -> str:
        return self.full_name or self.username


class SystemUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: int
    username: str
    full_name: Optional[str] = None
    role: str
    is_active: bool = True

    def __repr__(self):
        return f"<SystemUser {self.username} ({self.role})>"
