import pytest

from core.helpers import (
    ADMIN_NAV,
    BILLING_STAFF_NAV,
    DOCTOR_NAV,
    NURSE_NAV,
    RECEPTIONIST_NAV,
    WARD_BOY_NAV,
    nav_items,
)
from core.routes import (
    DASHBOARD_PATH,
    LOGIN_PATH,
    ROUTES,
    allowed_paths,
    check_access,
    get_route,
)
from core.session_manager import SessionStore
from models.user import Role
from tests.conftest import make_user

ALL_ROLES = [r.value for r in Role]


def session_for(role=None, token="tok"):
    store = SessionStore({})
    store.init()
    if role is not None:
        store.start(make_user(role), token)
    return store


@pytest.mark.parametrize("path", [p for p, r in ROUTES.items() if not r.public])
def test_protected_routes_send_anonymous_users_to_login(path):
    assert check_access(path, session_for()) == LOGIN_PATH


def test_user_without_token_is_not_authenticated():
    store = SessionStore({"user": make_user("Admin"), "token": None})
    assert check_access(DASHBOARD_PATH, store) == LOGIN_PATH


@pytest.mark.parametrize("path", ["/", "/login"])
def test_public_routes_are_open(path):
    assert check_access(path, session_for()) is None


@pytest.mark.parametrize("role", ALL_ROLES)
def test_every_role_reaches_dashboard_and_account_pages(role):
    session = session_for(role)
    for path in (DASHBOARD_PATH, "/profile/settings", "/services/view"):
        assert check_access(path, session) is None


@pytest.mark.parametrize(
    "path,allowed",
    [
        ("/patients", {"Receptionist", "Doctor", "Nurse", "WardBoy", "Admin"}),
        ("/patients/new", {"Receptionist", "Admin"}),
        ("/appointments/schedule", {"Receptionist", "Doctor", "Admin"}),
        ("/appointments/manage", {"Receptionist", "Doctor", "Nurse", "Admin"}),
        ("/doctor/my-schedule", {"Doctor", "Admin"}),
        ("/assignments/my-tasks", {"Nurse", "WardBoy", "Doctor"}),
        ("/admin/users", {"Admin"}),
        ("/billing/generate", {"Admin", "BillingStaff"}),
        ("/admissions/new", {"Doctor", "Nurse", "Admin", "Receptionist"}),
        ("/treatments/log", {"Doctor", "Nurse", "Admin"}),
    ],
)
def test_role_allowlists(path, allowed):
    for role in ALL_ROLES:
        expected = None if role in allowed else DASHBOARD_PATH
        assert check_access(path, session_for(role)) == expected, role


def test_unknown_role_is_sent_to_dashboard():
    session = session_for("Janitor")
    assert check_access("/patients", session) == DASHBOARD_PATH
    assert check_access(DASHBOARD_PATH, session) is None


def test_unknown_path_redirects():
    assert check_access("/nowhere", session_for("Admin")) == DASHBOARD_PATH
    assert check_access("/nowhere", session_for()) == LOGIN_PATH
    assert get_route("/nowhere").path == DASHBOARD_PATH


def test_every_route_points_at_a_page():
    for route in ROUTES.values():
        assert route.page == "app.py" or route.page.startswith("pages/")


def test_allowed_paths_for_ward_boy():
    paths = set(allowed_paths(session_for("WardBoy")))
    assert "/assignments/my-tasks" in paths
    assert "/patients" in paths
    assert "/billing/generate" not in paths
    assert "/login" not in paths


@pytest.mark.parametrize("role, nav", [
    ("Admin", ADMIN_NAV),
    ("Doctor", DOCTOR_NAV),
    ("Nurse", NURSE_NAV),
    ("Receptionist", RECEPTIONIST_NAV),
    ("WardBoy", WARD_BOY_NAV),
    ("BillingStaff", BILLING_STAFF_NAV),
])
def test_role_sidebar_only_lists_reachable_pages(role, nav):
    assert nav_items(nav, session_for(role)) == list(nav)


def test_sidebar_hides_pages_the_role_cannot_open():
    items = nav_items(ADMIN_NAV, session_for("Nurse"))
    assert [item.path for item in items] == ["/dashboard", "/admissions"]
