from typing import Optional
from pydantic import BaseModel, ConfigDict


class Bill(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bill_id: int
    patient_id: int
    total_amount: float = 0.0
    amount_paid: float = 0.0
    payment_status: str = "Pending"
    bill_date: Optional[str] = None
    due_date: Optional[str] = None

    patient_name: Optional[str] = None

    @property
    def outstanding(self) -> float:
        """Display-only; the server owns the real balance."""
        return round(self.total_amount - self.amount_paid, 2)

    def __repr__(self):
        return f"<Bill {self.bill_id} {self.payment_status}>"


class HospitalService(BaseModel):
    """A billable service and its price."""

    model_config = ConfigDict(extra="ignore")

    service_id: int
    service_name: str
    description: Optional[str] = None
    cost: float = 0.0
    is_active: bool = True
