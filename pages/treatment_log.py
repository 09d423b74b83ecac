import streamlit as st

from core.helpers import options_map, page_shell, render_footer, show_mutation_result, show_query_error
from core.status import TREATABLE_APPOINTMENT_STATUSES
from core.time_utils import display_datetime
from core.validation import TREATMENT_FORM, validate_form
from services import appointment_service, patient_service, staff_service, treatment_service
from views.forms import datetime_input, form_key, reset_form
from views.widgets import TREATMENT_PREFILL_KEY, profile_not_linked

# Page config is set globally in app.py

ctx = page_shell("/treatments/log")

user = ctx.user
prefill = st.session_state.get(TREATMENT_PREFILL_KEY) or {}

# Doctors and nurses log under their own staff profile; admins pick the doctor
if user.role == "Admin":
    doctors_result = staff_service.active_doctors(ctx)
    if show_query_error(doctors_result, "Doctors"):
        st.stop()
    doctors = options_map(doctors_result.data, label=lambda d: d.option_label, value=lambda d: d.doctor_id)
    staff_id = st.selectbox("Treating Doctor *", list(doctors), index=None, format_func=doctors.get,
                            placeholder="Select doctor...")
else:
    staff_id = user.linked_staff_id
    if staff_id is None:
        profile_not_linked(user.role)
        st.stop()

patients_result = patient_service.patient_options(ctx)
if show_query_error(patients_result, "Patients"):
    st.stop()
patients = options_map(patients_result.data, label=lambda p: p.option_label, value=lambda p: p.patient_id)

patient_ids = list(patients)
patient_id = st.selectbox(
    "Patient *",
    patient_ids,
    index=patient_ids.index(prefill["patient_id"]) if prefill.get("patient_id") in patients else None,
    format_func=patients.get,
    placeholder="Select patient...",
)

appointments = {}
if patient_id is not None:
    result = appointment_service.patient_appointments(ctx, patient_id)
    if not show_query_error(result, "Appointments"):
        treatable = {s.value for s in TREATABLE_APPOINTMENT_STATUSES}
        appointments = {
            a.appointment_id: f"#{a.appointment_id} • {display_datetime(a.appointment_datetime)} • {a.status}"
            for a in result.data or []
            if a.status in treatable
        }

key = form_key("log_treatment")
with st.form(key):
    appointment_ids = list(appointments)
    appointment_id = st.selectbox(
        "Related Appointment",
        appointment_ids,
        index=appointment_ids.index(prefill["appointment_id"]) if prefill.get("appointment_id") in appointments else None,
        format_func=appointments.get,
        placeholder="None",
    )
    treatment_name = st.text_input("Treatment Name *")
    diagnosis = st.text_area("Diagnosis *")
    treatment_plan = st.text_area("Treatment Plan")
    medications = st.text_area("Medications Prescribed")
    started = datetime_input("Start Date & Time *", key)
    notes = st.text_area("Notes")
    submitted = st.form_submit_button("Log Treatment", disabled=ctx.cache.is_mutating("log_treatment"))

if submitted:
    values = {
        "patient_id": patient_id,
        "appointment_id": appointment_id,
        "treatment_name": treatment_name,
        "diagnosis": diagnosis,
        "treatment_plan": treatment_plan,
        "medications_prescribed": medications,
        "start_datetime": started,
        "notes": notes,
    }
    errors = validate_form(values, TREATMENT_FORM)
    if staff_id is None:
        errors["doctor_id"] = "Treating Doctor is required."
    if errors:
        for message in errors.values():
            st.error(message)
    else:
        result = treatment_service.log_treatment(ctx, values, staff_id)
        if show_mutation_result(result, "Treatment logged successfully!"):
            st.session_state.pop(TREATMENT_PREFILL_KEY, None)
            reset_form("log_treatment")
            st.rerun()

render_footer()
