from .user import Role, SessionUser, SystemUser, parse_role
from .patient import Patient
from .appointment import Appointment
from .admission import Admission, Room
from .treatment import Treatment
from .assignment import Assignment
from .bill import Bill, HospitalService
from .staff import Doctor, Nurse, WardBoy

__all__ = [
    "Role",
    "SessionUser",
    "SystemUser",
    "parse_role",
    "Patient",
    "Appointment",
    "Admission",
    "Room",
    "Treatment",
    "Assignment",
    "Bill",
    "HospitalService",
    "Doctor",
    "Nurse",
    "WardBoy",
]
