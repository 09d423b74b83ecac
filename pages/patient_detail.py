import streamlit as st

from core.helpers import go_to, page_shell, render_footer, show_query_error
from core.status import TREATABLE_APPOINTMENT_STATUSES, status_badge
from core.time_utils import display_date, display_datetime
from models.user import Role
from services import admission_service, appointment_service, patient_service, treatment_service
from views.widgets import open_treatment_log

# Page config is set globally in app.py

ctx = page_shell("/patients/detail")

if "selected_patient" not in st.session_state:
    st.error("No patient selected.")
    if st.button("Back to Patient List"):
        go_to("/patients")
    st.stop()

patient_id = st.session_state["selected_patient"]
can_log = ctx.session.role in (Role.DOCTOR.value, Role.NURSE.value)

# The patient record gates every dependent query
patient_result = patient_service.load_patient(ctx, patient_id)
if show_query_error(patient_result, "Patient"):
    if st.button("Back to Patient List"):
        go_to("/patients")
    st.stop()

patient = patient_result.data
loaded = patient is not None

# ---------------------------------
# Patient record
# ---------------------------------
st.subheader(patient.full_name if loaded else f"Patient #{patient_id}")
if loaded:
    c1, c2, c3 = st.columns(3)
    c1.write(f"**Patient ID:** {patient.patient_id}")
    c1.write(f"**Date of Birth:** {display_date(patient.date_of_birth)}")
    c1.write(f"**Gender:** {patient.gender or '—'}")
    c2.write(f"**Phone:** {patient.phone_number or '—'}")
    c2.write(f"**Email:** {patient.email or '—'}")
    c2.write(f"**Address:** {patient.address or '—'}")
    c3.write(f"**Emergency Contact:** {patient.emergency_contact_name or '—'}")
    c3.write(f"**Emergency Phone:** {patient.emergency_contact_phone or '—'}")
    c3.write(f"**Status:** {'Active' if patient.is_active else 'Inactive'}")

    actions = st.columns(3)
    if ctx.session.role in (Role.RECEPTIONIST.value, Role.DOCTOR.value, Role.ADMIN.value):
        if actions[0].button("Schedule Appointment"):
            go_to("/appointments/schedule")
    if actions[1].button("Admit Patient"):
        go_to("/admissions/new")
    if can_log and actions[2].button("Log Treatment"):
        open_treatment_log(patient.patient_id)

st.markdown("---")

appointments_tab, treatments_tab, admissions_tab = st.tabs(["Appointments", "Treatments", "Admissions"])

with appointments_tab:
    result = appointment_service.patient_appointments(ctx, patient_id, enabled=loaded)
    treatable = {s.value for s in TREATABLE_APPOINTMENT_STATUSES}
    if not show_query_error(result, "Appointments"):
        appointments = result.data or []
        if not appointments:
            st.info("No appointments on record.")
        for appt in appointments:
            with st.container(border=True):
                left, right = st.columns([4, 1])
                left.write(f"**{display_datetime(appt.appointment_datetime)}** • {appt.doctor_name or 'Doctor'}")
                left.caption(appt.reason or "No reason given")
                left.markdown(status_badge(appt.status))
                if can_log and appt.status in treatable:
                    if right.button("Log Treatment", key=f"log_{appt.appointment_id}"):
                        open_treatment_log(appt.patient_id, appt.appointment_id)

with treatments_tab:
    result = treatment_service.patient_treatments(ctx, patient_id, enabled=loaded)
    if not show_query_error(result, "Treatments"):
        treatments = result.data or []
        if not treatments:
            st.info("No treatments recorded.")
        for t in treatments:
            with st.expander(f"{t.treatment_name} — {display_datetime(t.start_datetime)}"):
                st.write(f"**Diagnosis:** {t.diagnosis or '—'}")
                st.write(f"**Plan:** {t.treatment_plan or '—'}")
                st.write(f"**Medications:** {t.medications_prescribed or '—'}")
                if t.notes:
                    st.caption(t.notes)

with admissions_tab:
    result = admission_service.patient_admissions(ctx, patient_id, enabled=loaded)
    if not show_query_error(result, "Admissions"):
        admissions = result.data or []
        if not admissions:
            st.info("No admissions on record.")
        for a in admissions:
            with st.container(border=True):
                state = "Active" if a.is_active else f"Discharged {display_datetime(a.discharge_datetime)}"
                st.write(f"**Admitted {display_datetime(a.admission_datetime)}** • Room {a.room_id or '—'} • {state}")
                st.caption(a.reason_for_admission or "No reason recorded")

if st.button("Back to Patient List"):
    go_to("/patients")

render_footer()
