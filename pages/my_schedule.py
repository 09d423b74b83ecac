import streamlit as st

from core.helpers import page_shell, render_footer, show_query_error
from core.status import AppointmentStatus
from services import appointment_service, staff_service
from views.widgets import appointment_actions, appointment_row, profile_not_linked

# Page config is set globally in app.py

ctx = page_shell("/doctor/my-schedule")

user = ctx.user
doctor_id = user.linked_staff_id

# Admins have no schedule of their own and pick a doctor
if user.role == "Admin":
    doctors_result = staff_service.active_doctors(ctx)
    if show_query_error(doctors_result, "Doctors"):
        st.stop()
    doctors = {d.doctor_id: d.option_label for d in doctors_result.data or []}
    doctor_id = st.selectbox("Doctor", list(doctors), index=None, format_func=doctors.get,
                             placeholder="Select doctor...")
    if doctor_id is None:
        st.info("Select a doctor to view their schedule.")
        render_footer()
        st.stop()
elif doctor_id is None:
    profile_not_linked("Doctor")
    st.stop()

c1, c2, c3 = st.columns(3)
date_from = c1.date_input("From", value=None)
date_to = c2.date_input("To", value=None)
status = c3.selectbox("Status", [s.value for s in AppointmentStatus], index=None, placeholder="All statuses")

result = appointment_service.list_doctor_appointments(
    ctx, doctor_id, {"dateFrom": date_from, "dateTo": date_to, "status": status}
)
if show_query_error(result, "My Schedule"):
    st.stop()

appointments = result.data or []
if not appointments:
    st.info("No appointments found for the selected filters.")

for appt in appointments:
    with st.container(border=True):
        left, right = st.columns([3, 2])
        with left:
            appointment_row(appt)
        with right:
            appointment_actions(ctx, appt, "my_schedule", log_on_complete=user.role != "Admin")

render_footer()
