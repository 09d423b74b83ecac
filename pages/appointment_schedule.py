import streamlit as st

from core.helpers import options_map, page_shell, render_footer, show_mutation_result, show_query_error
from core.validation import APPOINTMENT_FORM, validate_form
from services import appointment_service, patient_service, staff_service
from views.forms import datetime_input, form_key, reset_form

# Page config is set globally in app.py

ctx = page_shell("/appointments/schedule")

patients_result = patient_service.patient_options(ctx)
doctors_result = staff_service.active_doctors(ctx)
if show_query_error(patients_result, "Patients") or show_query_error(doctors_result, "Doctors"):
    st.stop()

patients = options_map(patients_result.data, label=lambda p: p.option_label, value=lambda p: p.patient_id)
doctors = options_map(doctors_result.data, label=lambda d: d.option_label, value=lambda d: d.doctor_id)

preselected = st.session_state.get("selected_patient")
key = form_key("schedule_appointment")

with st.form(key):
    patient_ids = list(patients)
    patient_id = st.selectbox(
        "Patient *",
        patient_ids,
        index=patient_ids.index(preselected) if preselected in patients else None,
        format_func=patients.get,
        placeholder="Select patient...",
    )
    doctor_id = st.selectbox(
        "Doctor *",
        list(doctors),
        index=None,
        format_func=doctors.get,
        placeholder="Select doctor...",
    )
    when = datetime_input("Appointment Date & Time *", key)
    reason = st.text_area("Reason for Visit *")
    submitted = st.form_submit_button(
        "Schedule Appointment", disabled=ctx.cache.is_mutating("create_appointment")
    )

if submitted:
    values = {
        "patient_id": patient_id,
        "doctor_id": doctor_id,
        "appointment_datetime": when,
        "reason": reason,
    }
    errors = validate_form(values, APPOINTMENT_FORM)
    if errors:
        for message in errors.values():
            st.error(message)
    else:
        result = appointment_service.create_appointment(ctx, values)
        if show_mutation_result(result, "Appointment scheduled successfully!"):
            reset_form("schedule_appointment")
            st.rerun()

render_footer()
