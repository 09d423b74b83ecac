# models/patient.py

from typing import Optional
from pydantic import BaseModel, ConfigDict


class Patient(BaseModel):
    model_config = ConfigDict(extra="ignore")

    patient_id: int

    # Demographics
    first_name: str
    last_name: str
    date_of_birth: Optional[str] = None  # ISO date
    gender: Optional[str] = None

    # Contact
    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None

    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def option_label(self) -> str:
        return f"{self.full_name} (ID: {self.patient_id})"

    def __repr__(self):
        return f"<Patient {self.patient_id} - {self.full_name}>"
