from typing import Optional
from pydantic import BaseModel, ConfigDict


class _StaffBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Doctor(_StaffBase):
    doctor_id: int
    specialization: Optional[str] = None

    @property
    def option_label(self) -> str:
        return f"Dr. {self.full_name} ({self.specialization or 'General'})"


class Nurse(_StaffBase):
    nurse_id: int

    @property
    def option_label(self) -> str:
        return f"Nurse {self.full_name}"


class WardBoy(_StaffBase):
    ward_boy_id: int

    @property
    def option_label(self) -> str:
        return f"Ward Boy {self.full_name}"
