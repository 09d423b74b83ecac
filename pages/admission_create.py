import streamlit as st

from core.helpers import go_to, options_map, page_shell, render_footer, show_mutation_result, show_query_error
from core.validation import ADMISSION_FORM, validate_form
from services import admission_service, patient_service, room_service, staff_service
from views.forms import datetime_input, form_key, reset_form

# Page config is set globally in app.py

ctx = page_shell("/admissions/new")

patients_result = patient_service.patient_options(ctx)
doctors_result = staff_service.active_doctors(ctx)
rooms_result = room_service.room_choices(ctx)
if (
    show_query_error(patients_result, "Patients")
    or show_query_error(doctors_result, "Doctors")
    or show_query_error(rooms_result, "Rooms")
):
    st.stop()

patients = options_map(patients_result.data, label=lambda p: p.option_label, value=lambda p: p.patient_id)
doctors = options_map(doctors_result.data, label=lambda d: d.option_label, value=lambda d: d.doctor_id)

# Full rooms stay in the list, sorted last and marked, but cannot be submitted
rooms = sorted(rooms_result.data or [], key=lambda r: (not r.selectable, r.room_number))
rooms_by_id = {r.room_id: r for r in rooms}


def room_label(room_id):
    room = rooms_by_id[room_id]
    return room.option_label if room.selectable else f"{room.option_label} (Full)"


if rooms and not any(r.selectable for r in rooms):
    st.warning("All rooms are currently full.")

preselected = st.session_state.get("selected_patient")
preselected_doctor = ctx.user.linked_staff_id if ctx.session.role == "Doctor" else None

key = form_key("admit_patient")
with st.form(key):
    patient_ids = list(patients)
    patient_id = st.selectbox(
        "Patient *",
        patient_ids,
        index=patient_ids.index(preselected) if preselected in patients else None,
        format_func=patients.get,
        placeholder="Select patient...",
    )
    doctor_ids = list(doctors)
    doctor_id = st.selectbox(
        "Admitting Doctor *",
        doctor_ids,
        index=doctor_ids.index(preselected_doctor) if preselected_doctor in doctors else None,
        format_func=doctors.get,
        placeholder="Select doctor...",
    )
    room_id = st.selectbox(
        "Room *",
        list(rooms_by_id),
        index=None,
        format_func=room_label,
        placeholder="Select room...",
    )
    admitted_at = datetime_input("Admission Date & Time *", key)
    reason = st.text_area("Reason for Admission")
    submitted = st.form_submit_button("Admit Patient", disabled=ctx.cache.is_mutating("admit_patient"))

if submitted:
    values = {
        "patient_id": patient_id,
        "admitting_doctor_id": doctor_id,
        "room_id": room_id,
        "admission_datetime": admitted_at,
        "reason_for_admission": reason,
    }
    errors = validate_form(values, ADMISSION_FORM)
    if room_id is not None and not rooms_by_id[room_id].selectable:
        errors["room_id"] = f"Room {rooms_by_id[room_id].room_number} is full."
    if errors:
        for message in errors.values():
            st.error(message)
    else:
        result = admission_service.admit_patient(ctx, values)
        if show_mutation_result(result, "Patient admitted successfully!"):
            reset_form("admit_patient")
            st.session_state["selected_patient"] = admission_service.admitted_patient_id(
                result.data, admission_service.build_payload(values)
            )
            go_to("/patients/detail")

render_footer()
