"""
Role -> UI composition.

``dispatch`` is total: any role string, including None or one the server
invented later, yields a RoleView. Unmapped roles get the placeholder
dashboard and a minimal sidebar instead of an error.
"""

from dataclasses import dataclass
from typing import Callable

from core import helpers
from models.user import Role, parse_role
from views import dashboards


@dataclass(frozen=True)
class RoleView:
    dashboard: Callable
    sidebar: Callable
    fallback: bool = False


ROLE_VIEWS = {
    Role.ADMIN: RoleView(dashboards.render_admin_dashboard, helpers.render_admin_sidebar),
    Role.DOCTOR: RoleView(dashboards.render_doctor_dashboard, helpers.render_doctor_sidebar),
    Role.NURSE: RoleView(dashboards.render_nurse_dashboard, helpers.render_nurse_sidebar),
    Role.RECEPTIONIST: RoleView(dashboards.render_receptionist_dashboard, helpers.render_receptionist_sidebar),
    Role.WARD_BOY: RoleView(dashboards.render_ward_boy_dashboard, helpers.render_ward_boy_sidebar),
    Role.BILLING_STAFF: RoleView(dashboards.render_billing_staff_dashboard, helpers.render_billing_staff_sidebar),
}

FALLBACK_VIEW = RoleView(
    dashboards.render_unconfigured_dashboard,
    helpers.render_fallback_sidebar,
    fallback=True,
)


def dispatch(role) -> RoleView:
    return ROLE_VIEWS.get(parse_role(role), FALLBACK_VIEW)
