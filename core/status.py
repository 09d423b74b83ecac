"""
Status state machines for appointments and staff assignments.

Every view that offers status buttons asks ``actions_for`` which buttons to
show, so the "Start only when Pending" style rules live in one place. The
server stays authoritative and may still reject a transition.
"""

from dataclasses import dataclass
from enum import Enum


class AppointmentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    CHECKED_IN = "Checked-In"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "No Show"


class AssignmentStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class InvalidTransition(ValueError):
    pass


@dataclass(frozen=True)
class Transition:
    label: str
    target: Enum


class StatusMachine:
    def __init__(self, status_enum, transitions: dict):
        self.status_enum = status_enum
        self.transitions = transitions

    def parse(self, value):
        if isinstance(value, self.status_enum):
            return value
        try:
            return self.status_enum(value)
        except ValueError:
            return None

    def actions_for(self, status) -> tuple:
        """Buttons to show for an entity in ``status`` (unknown status: none)."""
        current = self.parse(status)
        if current is None:
            return ()
        return self.transitions.get(current, ())

    def can_transition(self, current, target) -> bool:
        target = self.parse(target)
        return any(t.target == target for t in self.actions_for(current))

    def validate(self, current, target):
        """Return the parsed target or raise InvalidTransition."""
        if not self.can_transition(current, target):
            raise InvalidTransition(f"Cannot change status from '{current}' to '{target}'.")
        return self.parse(target)

    def is_terminal(self, status) -> bool:
        return self.parse(status) is not None and not self.actions_for(status)


APPOINTMENT_FLOW = StatusMachine(
    AppointmentStatus,
    {
        AppointmentStatus.SCHEDULED: (
            Transition("Check In", AppointmentStatus.CHECKED_IN),
            Transition("Cancel", AppointmentStatus.CANCELLED),
            Transition("No Show", AppointmentStatus.NO_SHOW),
        ),
        AppointmentStatus.CHECKED_IN: (
            Transition("Start", AppointmentStatus.IN_PROGRESS),
            Transition("Cancel", AppointmentStatus.CANCELLED),
        ),
        AppointmentStatus.IN_PROGRESS: (
            Transition("Complete", AppointmentStatus.COMPLETED),
        ),
    },
)

# Only Pending -> In Progress -> Completed is driven from the client
ASSIGNMENT_FLOW = StatusMachine(
    AssignmentStatus,
    {
        AssignmentStatus.PENDING: (
            Transition("Start", AssignmentStatus.IN_PROGRESS),
        ),
        AssignmentStatus.IN_PROGRESS: (
            Transition("Complete", AssignmentStatus.COMPLETED),
        ),
    },
)

# Statuses shown on a doctor's "today" board
ACTIVE_APPOINTMENT_STATUSES = (
    AppointmentStatus.SCHEDULED,
    AppointmentStatus.CHECKED_IN,
    AppointmentStatus.IN_PROGRESS,
)

# Appointments a treatment may be logged against
TREATABLE_APPOINTMENT_STATUSES = (
    AppointmentStatus.CHECKED_IN,
    AppointmentStatus.IN_PROGRESS,
    AppointmentStatus.COMPLETED,
)

STATUS_BADGES = {
    "Scheduled": "blue",
    "Checked-In": "orange",
    "In Progress": "violet",
    "Completed": "green",
    "Cancelled": "red",
    "No Show": "gray",
    "Pending": "orange",
    "Partially Paid": "orange",
    "Paid": "green",
    "Overdue": "red",
}


def status_badge(status: str) -> str:
    """Markdown colored badge for a status string."""
    color = STATUS_BADGES.get(status, "gray")
    return f":{color}-background[{status}]"
