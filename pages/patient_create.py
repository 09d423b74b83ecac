import streamlit as st

from core.helpers import go_to, page_shell, render_footer, show_mutation_result
from services import patient_service
from views.forms import form_key, patient_form, reset_form

# Page config is set globally in app.py

ctx = page_shell("/patients/new")

st.write("Fields marked * are required.")

values = patient_form(
    form_key("new_patient"),
    submit_label="Register Patient",
    disabled=ctx.cache.is_mutating("create_patient"),
)

if values is not None:
    result = patient_service.create_patient(ctx, values)
    if show_mutation_result(result, "Patient registered successfully!"):
        patient = (result.data or {}).get("patient") or result.data or {}
        reset_form("new_patient")
        if patient.get("patient_id"):
            st.session_state["selected_patient"] = patient["patient_id"]
            go_to("/patients/detail")
        st.rerun()

if st.button("Back to Patient List"):
    go_to("/patients")

render_footer()
