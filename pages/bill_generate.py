from datetime import date, timedelta

import streamlit as st

from core.helpers import go_to, options_map, page_shell, render_footer, show_mutation_result, show_query_error
from core.validation import BILL_FORM, validate_form
from services import billing_service, patient_service
from views.forms import form_key, reset_form

# Page config is set globally in app.py

ctx = page_shell("/billing/generate")

patients_result = patient_service.patient_options(ctx)
if show_query_error(patients_result, "Patients"):
    st.stop()
patients = options_map(patients_result.data, label=lambda p: p.option_label, value=lambda p: p.patient_id)

with st.form(form_key("generate_bill")):
    patient_id = st.selectbox("Patient *", list(patients), index=None, format_func=patients.get,
                              placeholder="Select patient...")
    total_amount = st.number_input("Total Amount *", min_value=0.0, step=0.01, format="%.2f")
    c1, c2 = st.columns(2)
    bill_date = c1.date_input("Bill Date", value=date.today())
    due_date = c2.date_input("Due Date", value=date.today() + timedelta(days=30))
    submitted = st.form_submit_button("Generate Bill", disabled=ctx.cache.is_mutating("generate_bill"))

if submitted:
    values = {
        "patient_id": patient_id,
        "total_amount": total_amount if total_amount else None,
        "bill_date": bill_date,
        "due_date": due_date,
    }
    errors = validate_form(values, BILL_FORM)
    if bill_date and due_date and due_date < bill_date:
        errors["due_date"] = "Due date cannot be before the bill date."
    if errors:
        for message in errors.values():
            st.error(message)
    else:
        result = billing_service.generate_bill(ctx, values)
        if show_mutation_result(result, "Bill generated successfully!"):
            reset_form("generate_bill")
            bill = (result.data or {}).get("bill") or {}
            if bill.get("bill_id"):
                st.session_state["selected_bill"] = bill["bill_id"]
                go_to("/billing/bill")
            st.rerun()

render_footer()
