import streamlit as st

from core.helpers import page_shell, render_footer, show_query_error
from services import billing_service

# Page config is set globally in app.py

ctx = page_shell("/services/view")

result = billing_service.list_services(ctx)
if show_query_error(result, "Services"):
    st.stop()

services = [s for s in result.data or [] if s.is_active]
search = st.text_input("Search services", placeholder="Service name")
if search.strip():
    q = search.strip().lower()
    services = [s for s in services if q in s.service_name.lower()]

if not services:
    st.info("No services found.")

for s in services:
    with st.container(border=True):
        left, right = st.columns([4, 1])
        left.write(f"**{s.service_name}**")
        left.caption(s.description or "")
        right.metric("Cost", f"{s.cost:,.2f}")

render_footer()
