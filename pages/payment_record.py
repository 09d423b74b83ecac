import streamlit as st

from core.helpers import go_to, page_shell, render_footer, show_mutation_result, show_query_error
from core.validation import payment_form, validate_form
from services import billing_service
from services.billing_service import PAYMENT_METHODS
from views.forms import form_key, reset_form

# Page config is set globally in app.py

ctx = page_shell("/billing/payments/new")

result = billing_service.list_bills(ctx)
if show_query_error(result, "Bills"):
    st.stop()

open_bills = {b.bill_id: b for b in result.data or [] if b.outstanding > 0}
if not open_bills:
    st.info("There are no bills with an outstanding balance.")
    render_footer()
    st.stop()


def bill_label(bill_id):
    b = open_bills[bill_id]
    who = b.patient_name or f"Patient #{b.patient_id}"
    return f"Bill #{b.bill_id} • {who} • Outstanding {b.outstanding:,.2f}"


bill_ids = list(open_bills)
preselected = st.session_state.get("selected_bill")
bill_id = st.selectbox(
    "Bill *",
    bill_ids,
    index=bill_ids.index(preselected) if preselected in open_bills else None,
    format_func=bill_label,
    placeholder="Select bill...",
)

bill = open_bills.get(bill_id)
if bill is not None:
    c1, c2, c3 = st.columns(3)
    c1.metric("Total", f"{bill.total_amount:,.2f}")
    c2.metric("Paid", f"{bill.amount_paid:,.2f}")
    c3.metric("Outstanding", f"{bill.outstanding:,.2f}")

with st.form(form_key("record_payment")):
    amount = st.number_input(
        "Amount *",
        min_value=0.0,
        max_value=bill.outstanding if bill else None,
        step=0.01,
        format="%.2f",
    )
    method = st.selectbox("Payment Method *", PAYMENT_METHODS, index=None, placeholder="Select method...")
    submitted = st.form_submit_button(
        "Record Payment",
        disabled=bill is None or ctx.cache.is_mutating(f"record_payment:{bill_id}"),
    )

if submitted and bill is not None:
    values = {"bill_id": bill_id, "amount": amount if amount else None, "payment_method": method}
    errors = validate_form(values, payment_form(bill.outstanding))
    if errors:
        for message in errors.values():
            st.error(message)
    else:
        outcome = billing_service.record_payment(ctx, values)
        if show_mutation_result(outcome, "Payment recorded successfully!"):
            reset_form("record_payment")
            st.session_state["selected_bill"] = bill_id
            go_to("/billing/bill")

render_footer()
