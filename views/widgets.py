"""
Widgets shared by several pages: status action buttons and record tables.
"""

import streamlit as st

from core.helpers import go_to, show_mutation_result
from core.status import APPOINTMENT_FLOW, ASSIGNMENT_FLOW, AppointmentStatus, status_badge
from core.time_utils import display_datetime
from services import appointment_service, assignment_service

TREATMENT_PREFILL_KEY = "treatment_prefill"


def open_treatment_log(patient_id, appointment_id=None):
    st.session_state[TREATMENT_PREFILL_KEY] = {
        "patient_id": patient_id,
        "appointment_id": appointment_id,
    }
    go_to("/treatments/log")


def appointment_actions(ctx, appt, key_prefix: str, log_on_complete: bool = False):
    """One button per legal next status of ``appt``."""
    actions = APPOINTMENT_FLOW.actions_for(appt.status)
    if not actions:
        return
    cols = st.columns(len(actions))
    for col, action in zip(cols, actions):
        key = f"{key_prefix}_{appt.appointment_id}_{action.target.value}"
        disabled = ctx.cache.is_mutating(f"appointment_status:{appt.appointment_id}")
        if col.button(action.label, key=key, disabled=disabled, use_container_width=True):
            result = appointment_service.change_status(ctx, appt, action.target)
            if show_mutation_result(result, f"Appointment status updated to {action.target.value}!"):
                if log_on_complete and action.target is AppointmentStatus.COMPLETED:
                    open_treatment_log(appt.patient_id, appt.appointment_id)
                st.rerun()


def task_actions(ctx, task, staff_id, key_prefix: str):
    actions = ASSIGNMENT_FLOW.actions_for(task.status)
    for action in actions:
        key = f"{key_prefix}_{task.assignment_id}_{action.target.value}"
        label = f"{action.label} Task"
        disabled = ctx.cache.is_mutating(f"assignment_status:{task.assignment_id}")
        if st.button(label, key=key, disabled=disabled):
            result = assignment_service.change_status(ctx, task, action.target, staff_id)
            if show_mutation_result(result, f"Task status updated to {action.target.value}!"):
                st.rerun()


def appointment_row(appt):
    who = appt.patient_name or f"Patient #{appt.patient_id}"
    doctor = f" • {appt.doctor_name}" if appt.doctor_name else ""
    st.write(f"**{who}**{doctor}")
    st.caption(f"{display_datetime(appt.appointment_datetime)} • {appt.reason or 'No reason given'}")
    st.markdown(status_badge(appt.status))


def task_row(task):
    st.write(f"**{task.task_description or 'Task'}**")
    patient = task.patient_name or (f"Patient #{task.patient_id}" if task.patient_id else "—")
    room = f" • Room {task.room_number}" if task.room_number else ""
    st.caption(f"{patient}{room} • Starts {display_datetime(task.assignment_start_datetime)}")
    st.markdown(status_badge(task.status))


def render_task_board(ctx, tasks, staff_id, key_prefix: str, empty_message: str):
    if not tasks:
        st.info(empty_message)
        return
    for task in tasks:
        with st.container(border=True):
            left, right = st.columns([3, 1])
            with left:
                task_row(task)
            with right:
                task_actions(ctx, task, staff_id, key_prefix)


def profile_not_linked(role_label: str):
    st.error("Profile Not Linked")
    st.write(
        f"Your system user account is not yet linked to a {role_label} profile. "
        "Please contact an administrator to set up or link your professional profile."
    )
