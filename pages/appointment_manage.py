import streamlit as st

from core.helpers import options_map, page_shell, render_footer, show_mutation_result, show_query_error
from core.status import AppointmentStatus
from services import appointment_service, staff_service
from views.forms import datetime_input
from views.widgets import appointment_actions, appointment_row

# Page config is set globally in app.py

ctx = page_shell("/appointments/manage")

doctors_result = staff_service.active_doctors(ctx)
show_query_error(doctors_result, "Doctors")
doctors = options_map(doctors_result.data, label=lambda d: d.option_label, value=lambda d: d.doctor_id)

# ---------------------------------
# Filters
# ---------------------------------
with st.expander("Filters", expanded=True):
    c1, c2 = st.columns(2)
    date_from = c1.date_input("From", value=None)
    date_to = c2.date_input("To", value=None)
    c3, c4, c5 = st.columns(3)
    doctor_id = c3.selectbox("Doctor", list(doctors), index=None, format_func=doctors.get,
                             placeholder="All doctors")
    status = c4.selectbox("Status", [s.value for s in AppointmentStatus], index=None,
                          placeholder="All statuses")
    patient_search = c5.text_input("Patient", placeholder="Search by name")

filters = {
    "dateFrom": date_from,
    "dateTo": date_to,
    "doctorId": doctor_id,
    "status": status,
    "patientSearch": patient_search.strip(),
}

result = appointment_service.list_appointments(ctx, filters)
if show_query_error(result, "Appointments"):
    st.stop()

appointments = result.data or []
if not appointments:
    st.info("No appointments match these filters.")

for appt in appointments:
    with st.container(border=True):
        left, right = st.columns([3, 2])
        with left:
            appointment_row(appt)
        with right:
            appointment_actions(ctx, appt, "manage")

            if appt.status == AppointmentStatus.SCHEDULED.value:
                with st.popover("Reschedule"):
                    with st.form(f"reschedule_{appt.appointment_id}"):
                        new_dt = datetime_input("New Date & Time", f"reschedule_{appt.appointment_id}")
                        go = st.form_submit_button(
                            "Confirm",
                            disabled=ctx.cache.is_mutating(f"appointment_reschedule:{appt.appointment_id}"),
                        )
                    if go:
                        if new_dt is None:
                            st.error("New Date & Time is required.")
                        else:
                            outcome = appointment_service.reschedule(ctx, appt, new_dt)
                            if show_mutation_result(outcome, "Appointment rescheduled successfully!"):
                                st.rerun()

render_footer()
