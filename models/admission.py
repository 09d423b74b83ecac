from typing import Optional
from pydantic import BaseModel, ConfigDict


class Room(BaseModel):
    """Room occupancy is computed by the server and only displayed here."""

    model_config = ConfigDict(extra="ignore")

    room_id: int
    room_number: str
    room_type: Optional[str] = None
    capacity: int = 0
    current_occupancy: int = 0
    is_active: bool = True
    is_available: Optional[bool] = None

    @property
    def is_full(self) -> bool:
        return self.current_occupancy >= self.capacity

    @property
    def selectable(self) -> bool:
        if self.is_available is False:
            return False
        return not self.is_full

    @property
    def option_label(self) -> str:
        return (
            f"Room {self.room_number} ({self.room_type or 'General'}) - "
            f"Capacity: {self.capacity}, Occupied: {self.current_occupancy}"
        )


class Admission(BaseModel):
    model_config = ConfigDict(extra="ignore")

    admission_id: int
    patient_id: int
    room_id: Optional[int] = None
    admitting_doctor_id: Optional[int] = None
    admission_datetime: Optional[str] = None
    discharge_datetime: Optional[str] = None
    reason_for_admission: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return not self.discharge_datetime

    def __repr__(self):
        return f"<Admission {self.admission_id} patient={self.patient_id} room={self.room_id}>"
