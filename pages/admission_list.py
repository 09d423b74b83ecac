import streamlit as st

from core.helpers import go_to, page_shell, render_footer, show_query_error
from core.time_utils import display_datetime
from services import admission_service, room_service

# Page config is set globally in app.py

ctx = page_shell("/admissions")

if st.button("Admit Patient", type="primary"):
    go_to("/admissions/new")

admissions_result = admission_service.active_admissions(ctx)
rooms_result = room_service.list_rooms(ctx)
if show_query_error(admissions_result, "Admissions"):
    st.stop()
show_query_error(rooms_result, "Rooms")

rooms = {r.room_id: r.room_number for r in rooms_result.data or []}
admissions = admissions_result.data or []

st.caption(f"{len(admissions)} active admission(s)")
if not admissions:
    st.info("No patients are currently admitted.")

for a in admissions:
    with st.container(border=True):
        left, right = st.columns([4, 1])
        left.write(f"**Patient #{a.patient_id}** • Room {rooms.get(a.room_id, a.room_id or '—')}")
        left.caption(f"Admitted {display_datetime(a.admission_datetime)} • {a.reason_for_admission or 'No reason recorded'}")
        if right.button("View Patient", key=f"adm_{a.admission_id}"):
            st.session_state["selected_patient"] = a.patient_id
            go_to("/patients/detail")

render_footer()
