from typing import Optional
from pydantic import BaseModel, ConfigDict


class Assignment(BaseModel):
    """A staff task. The API calls these assignments."""

    model_config = ConfigDict(extra="ignore")

    assignment_id: int
    patient_id: Optional[int] = None
    # One of these is set depending on the assignee's role
    nurse_id: Optional[int] = None
    ward_boy_id: Optional[int] = None
    room_id: Optional[int] = None

    task_description: Optional[str] = None
    assignment_start_datetime: Optional[str] = None
    assignment_end_datetime: Optional[str] = None
    status: str = "Pending"

    patient_name: Optional[str] = None
    room_number: Optional[str] = None

    def __repr__(self):
        return f"<Assignment {self.assignment_id} ({self.status})>"
