import streamlit as st

from core.helpers import go_to, page_shell, render_footer, show_query_error
from core.status import status_badge
from core.time_utils import display_date
from services import billing_service
from services.billing_service import PAYMENT_STATUSES

# Page config is set globally in app.py

ctx = page_shell("/billing/manage-bills")

c1, c2 = st.columns([3, 1])
status = c1.selectbox("Payment Status", PAYMENT_STATUSES, index=None, placeholder="All bills")
with c2:
    if st.button("Generate Bill", use_container_width=True):
        go_to("/billing/generate")

result = billing_service.list_bills(ctx, status)
if show_query_error(result, "Bills"):
    st.stop()

bills = result.data or []
if not bills:
    st.info("No bills found.")
else:
    st.caption(
        f"{len(bills)} bill(s) • Outstanding {billing_service.total_outstanding(bills):,.2f}"
    )

for b in bills:
    with st.container(border=True):
        left, mid, right = st.columns([3, 2, 1])
        left.write(f"**Bill #{b.bill_id}** • {b.patient_name or f'Patient #{b.patient_id}'}")
        left.caption(f"Billed {display_date(b.bill_date)} • Due {display_date(b.due_date)}")
        mid.write(f"Total {b.total_amount:,.2f} • Paid {b.amount_paid:,.2f}")
        mid.markdown(status_badge(b.payment_status))
        if right.button("Open", key=f"bill_{b.bill_id}"):
            st.session_state["selected_bill"] = b.bill_id
            go_to("/billing/bill")

render_footer()
