from dataclasses import dataclass
from datetime import date

import streamlit as st

from core.routes import allowed_paths, get_route, page_for

NOTIFY_ICONS = {"success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️"}
LAST_PATH_KEY = "_last_path"


def notify(message: str, kind: str = "info"):
    """Transient notification (toast) shown on top of the current page."""
    st.toast(message, icon=NOTIFY_ICONS.get(kind))


def go_to(path: str):
    st.switch_page(page_for(path))


# -----------------------------
# Sidebar helpers
# -----------------------------
def hide_default_sidebar_nav():
    """Hide Streamlit's default multi-page navigation for a cleaner custom menu."""
    st.markdown(
        """
        <style>
        /* Hide the auto-generated Pages section */
        [data-testid="stSidebarNav"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def hide_sidebar_completely():
    """Completely hide Streamlit's sidebar and the toggle control.

    Used on the landing and login pages where navigation should not be visible.
    """
    st.markdown(
        """
        <style>
        [data-testid="stSidebar"] { display: none !important; }
        [data-testid="collapsedControl"] { display: none !important; }
        </style>
        """,
        unsafe_allow_html=True,
    )


@dataclass(frozen=True)
class NavItem:
    label: str
    path: str


ADMIN_NAV = (
    NavItem("Dashboard", "/dashboard"),
    NavItem("Manage System Users", "/admin/users"),
    NavItem("Manage Staff", "/admin/staff"),
    NavItem("Manage Rooms", "/admin/rooms"),
    NavItem("Manage Admissions", "/admissions"),
    NavItem("Manage Services", "/admin/services"),
    NavItem("Manage Bills", "/billing/manage-bills"),
)

DOCTOR_NAV = (
    NavItem("Dashboard", "/dashboard"),
    NavItem("My Schedule", "/doctor/my-schedule"),
    NavItem("Patient Records", "/patients"),
    NavItem("Log Treatment", "/treatments/log"),
    NavItem("Admit Patient", "/admissions/new"),
)

NURSE_NAV = (
    NavItem("Dashboard", "/dashboard"),
    NavItem("My Active Tasks", "/assignments/my-tasks"),
    NavItem("Patient Lookup", "/patients"),
    NavItem("Assign Staff", "/assignments/new"),
)

RECEPTIONIST_NAV = (
    NavItem("Dashboard", "/dashboard"),
    NavItem("Patients", "/patients"),
    NavItem("Register Patient", "/patients/new"),
    NavItem("Schedule Appointment", "/appointments/schedule"),
    NavItem("Manage Appointments", "/appointments/manage"),
    NavItem("Admit Patient", "/admissions/new"),
)

WARD_BOY_NAV = (
    NavItem("Dashboard", "/dashboard"),
    NavItem("My Active Tasks", "/assignments/my-tasks"),
    NavItem("Patient Lookup", "/patients"),
)

BILLING_STAFF_NAV = (
    NavItem("Dashboard", "/dashboard"),
    NavItem("Generate Bill", "/billing/generate"),
    NavItem("Record Payment", "/billing/payments/new"),
    NavItem("Manage Bills", "/billing/manage-bills"),
    NavItem("View Services", "/services/view"),
)


def _is_current(item: NavItem, current_path: str) -> bool:
    if current_path == item.path:
        return True
    return item.path != "/dashboard" and current_path.startswith(item.path + "/")


def nav_items(items, session) -> list[NavItem]:
    """Menu entries the session is allowed to open."""
    allowed = set(allowed_paths(session))
    return [item for item in items if item.path in allowed]


def _render_sidebar(title: str, items, current_path: str):
    from core.context import get_context

    hide_default_sidebar_nav()
    with st.sidebar:
        st.markdown(f"### {title}")
        for item in nav_items(items, get_context().session):
            current = _is_current(item, current_path)
            if st.button(
                item.label,
                key=f"nav_{item.path}",
                use_container_width=True,
                type="primary" if current else "secondary",
            ):
                go_to(item.path)
        st.divider()
        if st.button("My Account", key="nav_profile", use_container_width=True):
            go_to("/profile/settings")
        if st.button("Logout", key="nav_logout", use_container_width=True):
            from core.session_manager import logout_and_redirect
            logout_and_redirect()


def render_admin_sidebar(current_path: str):
    _render_sidebar("Admin Control Panel", ADMIN_NAV, current_path)


def render_doctor_sidebar(current_path: str):
    _render_sidebar("Doctor Menu", DOCTOR_NAV, current_path)


def render_nurse_sidebar(current_path: str):
    _render_sidebar("Nurse Menu", NURSE_NAV, current_path)


def render_receptionist_sidebar(current_path: str):
    _render_sidebar("Front Desk", RECEPTIONIST_NAV, current_path)


def render_ward_boy_sidebar(current_path: str):
    _render_sidebar("Ward Boy Menu", WARD_BOY_NAV, current_path)


def render_billing_staff_sidebar(current_path: str):
    _render_sidebar("Billing Menu", BILLING_STAFF_NAV, current_path)


def render_fallback_sidebar(current_path: str, role: str | None = None):
    hide_default_sidebar_nav()
    with st.sidebar:
        st.caption(f"No specific sidebar for {role or 'this role'}")
        if st.button("Dashboard", key="nav_/dashboard", use_container_width=True):
            go_to("/dashboard")
        if st.button("Logout", key="nav_logout", use_container_width=True):
            from core.session_manager import logout_and_redirect
            logout_and_redirect()


# -----------------------------
# Layout shell
# -----------------------------
def render_header(ctx):
    user = ctx.session.current_user
    cols = st.columns([4, 2])
    with cols[0]:
        st.markdown("## Hospital MS")
    with cols[1]:
        if user:
            st.caption(f"Logged in as **{user.display_name}** ({user.role})")
            if st.button("Logout", key="header_logout"):
                from core.session_manager import logout_and_redirect
                logout_and_redirect()


def render_footer():
    st.divider()
    st.caption(f"© {date.today().year} Hospital Management System. All rights reserved.")


def render_layout(ctx, path: str):
    """Header + role sidebar for an authenticated page.

    Navigating to a different page counts as a refocus for the cache.
    """
    from core.dispatcher import dispatch

    if st.session_state.get(LAST_PATH_KEY) != path:
        ctx.cache.refocus()
        st.session_state[LAST_PATH_KEY] = path

    render_header(ctx)
    role = ctx.session.role
    view = dispatch(role)
    if view.fallback:
        render_fallback_sidebar(path, role)
    else:
        view.sidebar(path)


def page_shell(path: str):
    """Guard the route, draw the layout and return the app context."""
    from core.session_manager import require_route

    ctx = require_route(path)
    render_layout(ctx, path)
    st.title(get_route(path).title)
    return ctx


# -----------------------------
# Query / mutation feedback
# -----------------------------
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


def _redirect_if_signed_out():
    """After a 401 the API hook has already cleared the session; send the user to log in."""
    from core.context import get_context

    if not get_context().session.is_authenticated:
        notify(SESSION_EXPIRED_MESSAGE, "warning")
        go_to("/login")


def show_query_error(result, label: str = "") -> bool:
    """Render a read error; returns True when the caller should skip the data."""
    if result.error is None:
        return False
    if result.error.status_code == 401:
        _redirect_if_signed_out()
    prefix = f"{label}: " if label else ""
    st.error(f"{prefix}{result.error_message}")
    return True


def show_mutation_result(result, success_message: str) -> bool:
    if result.ok:
        notify(success_message, "success")
    else:
        _redirect_if_signed_out()
        notify(result.error, "error")
        st.error(result.error)
    return result.ok


def options_map(items, label=lambda x: str(x), value=lambda x: x) -> dict:
    """{value: label} for st.selectbox(format_func=...)."""
    return {value(item): label(item) for item in items or []}
