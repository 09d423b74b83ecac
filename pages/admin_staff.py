import streamlit as st

from core.helpers import page_shell, render_footer, show_query_error
from services import staff_service

# Page config is set globally in app.py

ctx = page_shell("/admin/staff")


def staff_table(rows, id_field, extra=None):
    data = []
    for s in rows:
        row = {
            "ID": getattr(s, id_field),
            "Name": s.full_name,
            "Phone": s.phone_number or "",
            "Email": s.email or "",
        }
        if extra:
            row.update(extra(s))
        data.append(row)
    if not data:
        st.info("No active staff in this group.")
        return
    st.dataframe(data, use_container_width=True, hide_index=True)


doctors_tab, nurses_tab, ward_boys_tab = st.tabs(["Doctors", "Nurses", "Ward Boys"])

with doctors_tab:
    result = staff_service.active_doctors(ctx)
    if not show_query_error(result, "Doctors"):
        staff_table(result.data, "doctor_id", lambda d: {"Specialization": d.specialization or ""})

with nurses_tab:
    result = staff_service.active_nurses(ctx)
    if not show_query_error(result, "Nurses"):
        staff_table(result.data, "nurse_id")

with ward_boys_tab:
    result = staff_service.active_ward_boys(ctx)
    if not show_query_error(result, "Ward Boys"):
        staff_table(result.data, "ward_boy_id")

render_footer()
