"""
Role dashboards. ``core.dispatcher`` picks one per logged-in role.
"""

from datetime import datetime

import streamlit as st

from core.helpers import go_to, show_query_error
from core.query_cache import SCHEDULE_BOARD_POLICY, STATS_POLICY, TASK_BOARD_POLICY
from core.time_utils import display_date, display_datetime, parse_api_datetime, today_str
from services import appointment_service, assignment_service, billing_service, staff_service
from services.billing_service import BillingStats
from services.staff_service import AdminStats
from views.widgets import (
    appointment_actions,
    appointment_row,
    profile_not_linked,
    render_task_board,
)


def _quick_links(links):
    cols = st.columns(len(links))
    for col, (label, path) in zip(cols, links):
        if col.button(label, key=f"quick_{path}", use_container_width=True):
            go_to(path)


# ----------------------------------------------
# Admin
# ----------------------------------------------
def render_admin_dashboard(ctx):
    st.write(f"Welcome back, **{ctx.user.display_name}**.")

    @st.fragment(run_every=STATS_POLICY.refetch_interval)
    def stats_panel():
        result = staff_service.admin_stats(ctx)
        stats = result.data or AdminStats()
        if result.error:
            st.warning("Could not load some dashboard statistics.")

        st.subheader("Overview")
        r1 = st.columns(4)
        r1[0].metric("System Users", stats.total_users)
        r1[1].metric("Patients", stats.total_patients)
        r1[2].metric("Active Doctors", stats.total_doctors)
        r1[3].metric("Active Nurses", stats.total_nurses)
        r2 = st.columns(4)
        r2[0].metric("Ward Boys", stats.total_ward_boys)
        r2[1].metric("Rooms", stats.total_rooms)
        r2[2].metric("Occupied Beds", stats.occupied_beds)
        r2[3].metric("Appointments Today", stats.appointments_today)
        st.metric("Active Admissions", stats.active_admissions)

    stats_panel()

    st.subheader("Management")
    _quick_links([
        ("Users", "/admin/users"),
        ("Staff", "/admin/staff"),
        ("Rooms", "/admin/rooms"),
        ("Services", "/admin/services"),
    ])


# ----------------------------------------------
# Doctor
# ----------------------------------------------
def render_doctor_dashboard(ctx):
    doctor_id = ctx.user.linked_staff_id
    if doctor_id is None:
        profile_not_linked("Doctor")
        return

    st.write(f"Good day, Dr. **{ctx.user.display_name}**.")

    @st.fragment(run_every=SCHEDULE_BOARD_POLICY.refetch_interval)
    def todays_board():
        result = appointment_service.todays_appointments(ctx, doctor_id)
        if show_query_error(result, "Appointments"):
            return
        appointments = result.data or []

        now = datetime.now()
        upcoming = []
        for appt in appointments:
            dt = parse_api_datetime(appt.appointment_datetime)
            if dt is not None and dt.replace(tzinfo=None) >= now:
                upcoming.append(appt)
        c1, c2 = st.columns(2)
        c1.metric("Today's Appointments", len(appointments))
        if upcoming:
            nxt = upcoming[0]
            c2.metric("Next Appointment", display_datetime(nxt.appointment_datetime))
            c2.caption(nxt.patient_name or f"Patient #{nxt.patient_id}")
        else:
            c2.metric("Next Appointment", "—")

        st.subheader("Today's Schedule")
        if not appointments:
            st.info("No active appointments for today.")
            return
        for appt in appointments:
            with st.container(border=True):
                left, right = st.columns([3, 2])
                with left:
                    appointment_row(appt)
                with right:
                    appointment_actions(ctx, appt, "doc_dash", log_on_complete=True)

    todays_board()

    _quick_links([
        ("My Schedule", "/doctor/my-schedule"),
        ("Patient Records", "/patients"),
        ("Log Treatment", "/treatments/log"),
    ])


# ----------------------------------------------
# Nurse / Ward boy
# ----------------------------------------------
def _active_task_dashboard(ctx, role_label: str, links):
    staff_id = ctx.user.linked_staff_id
    if staff_id is None:
        profile_not_linked(role_label)
        return

    @st.fragment(run_every=TASK_BOARD_POLICY.refetch_interval)
    def task_panel():
        result = assignment_service.my_active_tasks(ctx, staff_id)
        if show_query_error(result, "My Tasks"):
            return
        tasks = result.data or []
        pending = sum(1 for t in tasks if t.status == "Pending")
        c1, c2 = st.columns(2)
        c1.metric("Pending Tasks", pending)
        c2.metric("In Progress", len(tasks) - pending)
        st.subheader("Active Tasks")
        render_task_board(ctx, tasks, staff_id, "dash_task", "No active tasks. Enjoy the calm!")

    task_panel()
    _quick_links(links)


def render_nurse_dashboard(ctx):
    st.write(f"Welcome, **{ctx.user.display_name}**.")
    _active_task_dashboard(ctx, "Nurse", [
        ("All My Tasks", "/assignments/my-tasks"),
        ("Patient Lookup", "/patients"),
        ("Assign Staff", "/assignments/new"),
    ])


def render_ward_boy_dashboard(ctx):
    st.write(f"Welcome, **{ctx.user.display_name}**.")
    _active_task_dashboard(ctx, "Ward Boy", [
        ("All My Tasks", "/assignments/my-tasks"),
        ("Patient Lookup", "/patients"),
    ])


# ----------------------------------------------
# Receptionist
# ----------------------------------------------
def render_receptionist_dashboard(ctx):
    st.write(f"Welcome, **{ctx.user.display_name}**.")
    _quick_links([
        ("Register Patient", "/patients/new"),
        ("Schedule Appointment", "/appointments/schedule"),
        ("Manage Appointments", "/appointments/manage"),
        ("Admit Patient", "/admissions/new"),
    ])

    today = today_str()
    result = appointment_service.list_appointments(ctx, {"dateFrom": today, "dateTo": today})
    st.subheader("Today's Appointments")
    if show_query_error(result, "Appointments"):
        return
    appointments = result.data or []
    if not appointments:
        st.info("No appointments scheduled for today.")
        return
    for appt in appointments:
        with st.container(border=True):
            left, right = st.columns([3, 2])
            with left:
                appointment_row(appt)
            with right:
                appointment_actions(ctx, appt, "rec_dash")


# ----------------------------------------------
# Billing staff
# ----------------------------------------------
def render_billing_staff_dashboard(ctx):
    st.write(f"Welcome, **{ctx.user.display_name}**.")

    @st.fragment(run_every=STATS_POLICY.refetch_interval)
    def stats_panel():
        result = billing_service.billing_stats(ctx)
        stats = result.data or BillingStats()
        if result.error:
            st.warning(f"Stats: {result.error_message}")
        cols = st.columns(4)
        cols[0].metric("Pending Bills", stats.pending_bills)
        cols[1].metric("Overdue Bills", stats.overdue_bills)
        cols[2].metric("Payments Today", f"{stats.payments_today:,.2f}")
        cols[3].metric("Total Outstanding", f"{stats.total_outstanding:,.2f}")

    stats_panel()

    _quick_links([
        ("Generate Bill", "/billing/generate"),
        ("Record Payment", "/billing/payments/new"),
        ("Manage Bills", "/billing/manage-bills"),
    ])

    st.subheader("Recent Pending Bills")
    result = billing_service.recent_pending_bills(ctx)
    if show_query_error(result, "Recent Bills"):
        return
    bills = result.data or []
    if not bills:
        st.info("No pending bills.")
        return
    for bill in bills:
        with st.container(border=True):
            left, right = st.columns([3, 1])
            left.write(f"**Bill #{bill.bill_id}** • {bill.patient_name or f'Patient #{bill.patient_id}'}")
            left.caption(f"{display_date(bill.bill_date)} • Outstanding {bill.outstanding:,.2f}")
            if right.button("Open", key=f"dash_bill_{bill.bill_id}"):
                st.session_state["selected_bill"] = bill.bill_id
                go_to("/billing/bill")


# ----------------------------------------------
# Fallback
# ----------------------------------------------
def render_unconfigured_dashboard(ctx):
    user = ctx.user
    name = user.display_name if user else "there"
    role = user.role if user else "unknown"
    st.subheader(f"Welcome, {name}!")
    st.write(f"Your role is: {role}. Dashboard not yet configured.")
