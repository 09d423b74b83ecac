from typing import Optional
from pydantic import BaseModel, ConfigDict


class Appointment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    appointment_id: int
    patient_id: int
    doctor_id: Optional[int] = None
    appointment_datetime: Optional[str] = None
    reason: Optional[str] = None
    # Kept as the raw string; core.status parses it into AppointmentStatus
    status: str = "Scheduled"

    # Denormalized names the list endpoints include for display
    patient_name: Optional[str] = None
    doctor_name: Optional[str] = None

    def __repr__(self):
        return f"<Appointment {self.appointment_id} ({self.status})>"
