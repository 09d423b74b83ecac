import streamlit as st

from core.helpers import page_shell, render_footer, show_query_error
from services import staff_service

# Page config is set globally in app.py

ctx = page_shell("/admin/users")

result = staff_service.list_users(ctx)
if show_query_error(result, "Users"):
    st.stop()

users = result.data or []
role_filter = st.selectbox("Role", sorted({u.role for u in users}), index=None, placeholder="All roles")
if role_filter:
    users = [u for u in users if u.role == role_filter]

st.caption(f"{len(users)} user(s)")
st.dataframe(
    [
        {
            "ID": u.user_id,
            "Username": u.username,
            "Full Name": u.full_name or "",
            "Role": u.role,
            "Active": "Yes" if u.is_active else "No",
        }
        for u in users
    ],
    use_container_width=True,
    hide_index=True,
)

render_footer()
