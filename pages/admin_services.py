import streamlit as st

from core.helpers import page_shell, render_footer, show_query_error
from services import billing_service

# Page config is set globally in app.py

ctx = page_shell("/admin/services")

result = billing_service.list_services(ctx)
if show_query_error(result, "Services"):
    st.stop()

services = result.data or []
show_inactive = st.checkbox("Show inactive services")
if not show_inactive:
    services = [s for s in services if s.is_active]

st.dataframe(
    [
        {
            "ID": s.service_id,
            "Service": s.service_name,
            "Description": s.description or "",
            "Cost": f"{s.cost:,.2f}",
            "Active": "Yes" if s.is_active else "No",
        }
        for s in services
    ],
    use_container_width=True,
    hide_index=True,
)

render_footer()
