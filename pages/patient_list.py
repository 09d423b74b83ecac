import time

import streamlit as st

from core.debounce import Debouncer
from core.helpers import go_to, notify, page_shell, render_footer, show_mutation_result, show_query_error
from core.time_utils import display_date
from models.user import Role
from services import patient_service
from views.forms import patient_form

# Page config is set globally in app.py

ctx = page_shell("/patients")
can_edit = ctx.session.role in (Role.ADMIN.value, Role.RECEPTIONIST.value)

# Debounced search: only the last term typed within the delay is fetched
if "patient_search_debouncer" not in st.session_state:
    st.session_state["patient_search_debouncer"] = Debouncer(delay=ctx.settings.search_debounce_ms / 1000)
debouncer = st.session_state["patient_search_debouncer"]

top_left, top_right = st.columns([4, 1])
with top_left:
    raw_search = st.text_input("Search patients", placeholder="Name, phone or email")
with top_right:
    if can_edit and st.button("Add Patient", use_container_width=True):
        go_to("/patients/new")

search = debouncer.update(raw_search.strip())
if debouncer.waiting:
    # A new keystroke reruns the script and interrupts this wait
    time.sleep(debouncer.remaining())
    search = debouncer.settled()

# ---------------------------------
# Edit / delete panels
# ---------------------------------
editing_id = st.session_state.get("patient_editing")
if can_edit and editing_id is not None:
    loaded = patient_service.load_patient(ctx, editing_id)
    st.subheader(f"Edit Patient #{editing_id}")
    if not show_query_error(loaded, "Patient") and loaded.data is not None:
        values = patient_form(
            f"edit_patient_{editing_id}",
            loaded.data,
            submit_label="Save Changes",
            disabled=ctx.cache.is_mutating(f"update_patient:{editing_id}"),
        )
        if values is not None:
            result = patient_service.update_patient(ctx, editing_id, values)
            if show_mutation_result(result, "Patient details updated successfully!"):
                st.session_state.pop("patient_editing", None)
                st.rerun()
    if st.button("Cancel editing"):
        st.session_state.pop("patient_editing", None)
        st.rerun()
    st.markdown("---")

deleting_id = st.session_state.get("patient_deleting")
if can_edit and deleting_id is not None:
    st.warning(f"Delete patient #{deleting_id}? This cannot be undone.")
    c1, c2 = st.columns(2)
    if c1.button("Yes, delete", type="primary"):
        result = patient_service.delete_patient(ctx, deleting_id)
        st.session_state.pop("patient_deleting", None)
        if show_mutation_result(result, "Patient deleted."):
            st.rerun()
    if c2.button("Keep patient"):
        st.session_state.pop("patient_deleting", None)
        st.rerun()

# ---------------------------------
# Table
# ---------------------------------
result = patient_service.list_patients(ctx, search)
if show_query_error(result, "Patients"):
    st.stop()

patients = result.data or []
if not patients:
    if search:
        st.info(f'No patients match "{search}".')
    else:
        st.info("No patients registered yet.")
    render_footer()
    st.stop()

st.caption(f"{len(patients)} patient(s)")

header = st.columns([1, 3, 2, 1, 2, 3])
for col, label in zip(header, ["ID", "Name", "Date of Birth", "Gender", "Phone", "Actions"]):
    col.markdown(f"**{label}**")

for p in patients:
    row = st.columns([1, 3, 2, 1, 2, 3])
    row[0].write(p.patient_id)
    row[1].write(p.full_name + ("" if p.is_active else " (inactive)"))
    row[2].write(display_date(p.date_of_birth))
    row[3].write(p.gender or "—")
    row[4].write(p.phone_number or "—")

    with row[5]:
        actions = st.columns(3 if can_edit else 1)
        if actions[0].button("View", key=f"view_{p.patient_id}"):
            st.session_state["selected_patient"] = p.patient_id
            go_to("/patients/detail")
        if can_edit:
            if actions[1].button("Edit", key=f"edit_{p.patient_id}"):
                st.session_state["patient_editing"] = p.patient_id
                st.session_state.pop("patient_deleting", None)
                st.rerun()
            if actions[2].button("Delete", key=f"delete_{p.patient_id}"):
                st.session_state["patient_deleting"] = p.patient_id
                st.session_state.pop("patient_editing", None)
                notify(f"Confirm deletion of {p.full_name} above.", "warning")
                st.rerun()

render_footer()
