import streamlit as st

from core.helpers import go_to, page_shell, render_footer, show_query_error
from core.status import status_badge
from core.time_utils import display_date
from services import billing_service

# Page config is set globally in app.py

ctx = page_shell("/billing/bill")

bill_id = st.session_state.get("selected_bill")
if bill_id is None:
    st.error("No bill selected.")
    if st.button("Back to Bills"):
        go_to("/billing/manage-bills")
    st.stop()

result = billing_service.load_bill(ctx, bill_id)
if show_query_error(result, "Bill") or result.data is None:
    if st.button("Back to Bills"):
        go_to("/billing/manage-bills")
    st.stop()

bill = result.data

st.subheader(f"Bill #{bill.bill_id}")
st.write(f"**Patient:** {bill.patient_name or f'Patient #{bill.patient_id}'}")
st.write(f"**Bill Date:** {display_date(bill.bill_date)}  |  **Due Date:** {display_date(bill.due_date)}")
st.markdown(status_badge(bill.payment_status))

c1, c2, c3 = st.columns(3)
c1.metric("Total Amount", f"{bill.total_amount:,.2f}")
c2.metric("Amount Paid", f"{bill.amount_paid:,.2f}")
c3.metric("Outstanding", f"{bill.outstanding:,.2f}")

col1, col2 = st.columns(2)
if bill.outstanding > 0 and col1.button("Record Payment", type="primary"):
    go_to("/billing/payments/new")
if col2.button("Back to Bills"):
    go_to("/billing/manage-bills")

render_footer()
