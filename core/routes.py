"""
Route table and guard chain.

Each route maps a path to a Streamlit page script. Authenticated routes are
wrapped by AuthGate; some are additionally wrapped by a RoleGate. Gates are
evaluated outermost first and the first failing gate decides the redirect.
A role mismatch redirects to the dashboard rather than showing an error.
"""

from dataclasses import dataclass, field

from models.user import Role, parse_role

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


class AuthGate:
    redirect_to = LOGIN_PATH

    def check(self, session) -> str | None:
        if session.is_authenticated:
            return None
        return self.redirect_to


class RoleGate:
    redirect_to = DASHBOARD_PATH

    def __init__(self, allowed_roles):
        self.allowed_roles = frozenset(Role(r) for r in allowed_roles)

    def check(self, session) -> str | None:
        role = parse_role(session.role)
        if role is not None and role in self.allowed_roles:
            return None
        return self.redirect_to

    def __repr__(self):
        return f"<RoleGate {sorted(r.value for r in self.allowed_roles)}>"


@dataclass(frozen=True)
class Route:
    path: str
    page: str
    title: str
    gates: tuple = field(default_factory=tuple)

    @property
    def public(self) -> bool:
        return not self.gates


AUTH = AuthGate()

PATIENT_VIEWERS = RoleGate([Role.RECEPTIONIST, Role.DOCTOR, Role.NURSE, Role.WARD_BOY, Role.ADMIN])
PATIENT_EDITORS = RoleGate([Role.RECEPTIONIST, Role.ADMIN])
SCHEDULERS = RoleGate([Role.RECEPTIONIST, Role.DOCTOR, Role.ADMIN])
APPOINTMENT_MANAGERS = RoleGate([Role.RECEPTIONIST, Role.DOCTOR, Role.NURSE, Role.ADMIN])
SCHEDULE_OWNERS = RoleGate([Role.DOCTOR, Role.ADMIN])
TASK_OWNERS = RoleGate([Role.NURSE, Role.WARD_BOY, Role.DOCTOR])
ADMIN_ONLY = RoleGate([Role.ADMIN])
BILLING = RoleGate([Role.ADMIN, Role.BILLING_STAFF])
ADMITTERS = RoleGate([Role.DOCTOR, Role.NURSE, Role.ADMIN, Role.RECEPTIONIST])
CLINICIANS = RoleGate([Role.DOCTOR, Role.NURSE, Role.ADMIN])


def _route(path, page, title, *gates):
    return Route(path=path, page=page, title=title, gates=tuple(gates))


ROUTES = {
    r.path: r
    for r in [
        # Public
        _route("/", "app.py", "Home"),
        _route(LOGIN_PATH, "pages/login.py", "Login"),
        # Authenticated
        _route(DASHBOARD_PATH, "pages/dashboard.py", "Dashboard", AUTH),
        _route("/patients", "pages/patient_list.py", "Patients", AUTH, PATIENT_VIEWERS),
        _route("/patients/detail", "pages/patient_detail.py", "Patient Details", AUTH, PATIENT_VIEWERS),
        _route("/patients/new", "pages/patient_create.py", "Register Patient", AUTH, PATIENT_EDITORS),
        _route("/appointments/schedule", "pages/appointment_schedule.py", "Schedule Appointment", AUTH, SCHEDULERS),
        _route("/appointments/manage", "pages/appointment_manage.py", "Manage Appointments", AUTH, APPOINTMENT_MANAGERS),
        _route("/doctor/my-schedule", "pages/my_schedule.py", "My Schedule", AUTH, SCHEDULE_OWNERS),
        _route("/assignments/my-tasks", "pages/my_tasks.py", "My Tasks", AUTH, TASK_OWNERS),
        _route("/assignments/new", "pages/assignment_create.py", "Assign Staff", AUTH, CLINICIANS),
        _route("/treatments/log", "pages/treatment_log.py", "Log Treatment", AUTH, CLINICIANS),
        _route("/admissions", "pages/admission_list.py", "Admissions", AUTH, ADMITTERS),
        _route("/admissions/new", "pages/admission_create.py", "Admit Patient", AUTH, ADMITTERS),
        _route("/admin/users", "pages/admin_users.py", "Manage System Users", AUTH, ADMIN_ONLY),
        _route("/admin/staff", "pages/admin_staff.py", "Manage Staff", AUTH, ADMIN_ONLY),
        _route("/admin/rooms", "pages/admin_rooms.py", "Manage Rooms", AUTH, ADMIN_ONLY),
        _route("/admin/services", "pages/admin_services.py", "Manage Services", AUTH, ADMIN_ONLY),
        _route("/billing/generate", "pages/bill_generate.py", "Generate Bill", AUTH, BILLING),
        _route("/billing/payments/new", "pages/payment_record.py", "Record Payment", AUTH, BILLING),
        _route("/billing/manage-bills", "pages/bill_manage.py", "Manage Bills", AUTH, BILLING),
        _route("/billing/bill", "pages/bill_detail.py", "Bill Details", AUTH, BILLING),
        _route("/profile/settings", "pages/profile_settings.py", "My Account", AUTH),
        _route("/services/view", "pages/services_view.py", "Services & Pricing", AUTH),
    ]
}


def get_route(path: str) -> Route:
    """Unknown paths fall back to the dashboard route (itself behind AuthGate)."""
    return ROUTES.get(path) or ROUTES[DASHBOARD_PATH]


def page_for(path: str) -> str:
    return get_route(path).page


def check_access(path: str, session) -> str | None:
    """Return the redirect path for the first failing gate, or None if allowed."""
    if path not in ROUTES:
        return AUTH.check(session) or DASHBOARD_PATH
    for gate in ROUTES[path].gates:
        redirect = gate.check(session)
        if redirect is not None:
            return redirect
    return None


def allowed_paths(session) -> list[str]:
    """Authenticated paths the session may open (used to build navigation)."""
    return [
        path for path, route in ROUTES.items()
        if not route.public and check_access(path, session) is None
    ]
