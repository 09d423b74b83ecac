import streamlit as st

from core.helpers import options_map, page_shell, render_footer, show_mutation_result, show_query_error
from core.validation import ASSIGNMENT_FORM, validate_form
from services import assignment_service, patient_service, room_service, staff_service
from views.forms import datetime_input, form_key, reset_form

# Page config is set globally in app.py

ctx = page_shell("/assignments/new")

patients_result = patient_service.patient_options(ctx)
nurses_result = staff_service.active_nurses(ctx)
ward_boys_result = staff_service.active_ward_boys(ctx)
rooms_result = room_service.list_rooms(ctx)
if show_query_error(patients_result, "Patients"):
    st.stop()
show_query_error(nurses_result, "Nurses")
show_query_error(ward_boys_result, "Ward Boys")
show_query_error(rooms_result, "Rooms")

patients = options_map(patients_result.data, label=lambda p: p.option_label, value=lambda p: p.patient_id)
rooms = options_map(rooms_result.data, label=lambda r: f"Room {r.room_number}", value=lambda r: r.room_id)

# Staff options carry their role so the payload knows which id field to fill
staff = {}
staff.update(options_map(nurses_result.data, label=lambda n: n.option_label, value=lambda n: ("Nurse", n.nurse_id)))
staff.update(options_map(ward_boys_result.data, label=lambda w: w.option_label,
                         value=lambda w: ("WardBoy", w.ward_boy_id)))

key = form_key("assign_staff")
with st.form(key):
    patient_ids = list(patients)
    preselected = st.session_state.get("selected_patient")
    patient_id = st.selectbox(
        "Patient *",
        patient_ids,
        index=patient_ids.index(preselected) if preselected in patients else None,
        format_func=patients.get,
        placeholder="Select patient...",
    )
    staff_choice = st.selectbox("Staff Member *", list(staff), index=None, format_func=staff.get,
                                placeholder="Select nurse or ward boy...")
    room_id = st.selectbox("Room", list(rooms), index=None, format_func=rooms.get, placeholder="No room")
    description = st.text_area("Task Description *")
    starts = datetime_input("Start Date & Time *", f"{key}_start")
    has_end = st.checkbox("Set an end time")
    ends = datetime_input("End Date & Time", f"{key}_end")
    submitted = st.form_submit_button("Create Assignment", disabled=ctx.cache.is_mutating("create_assignment"))

if submitted:
    values = {
        "patient_id": patient_id,
        "staff": staff_choice,
        "room_id": room_id,
        "task_description": description,
        "assignment_start_datetime": starts,
        "assignment_end_datetime": ends if has_end else None,
    }
    errors = validate_form(values, ASSIGNMENT_FORM)
    if has_end and starts and ends and ends <= starts:
        errors["assignment_end_datetime"] = "End time must be after the start time."
    if errors:
        for message in errors.values():
            st.error(message)
    else:
        result = assignment_service.create_assignment(ctx, values)
        if show_mutation_result(result, "Staff assigned successfully!"):
            reset_form("assign_staff")
            st.rerun()

render_footer()
