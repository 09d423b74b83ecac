from typing import Optional
from pydantic import BaseModel, ConfigDict


class Treatment(BaseModel):
    """A logged treatment. Append-only from this client."""

    model_config = ConfigDict(extra="ignore")

    treatment_id: int
    patient_id: int
    doctor_id: Optional[int] = None
    appointment_id: Optional[int] = None

    treatment_name: str
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    medications_prescribed: Optional[str] = None
    start_datetime: Optional[str] = None
    notes: Optional[str] = None

    def __repr__(self):
        return f"<Treatment {self.treatment_id} for patient {self.patient_id}>"
