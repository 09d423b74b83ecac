import streamlit as st

from core.helpers import page_shell, render_footer
from core.session_manager import logout_and_redirect

# Page config is set globally in app.py

ctx = page_shell("/profile/settings")

user = ctx.user

st.subheader(user.display_name)
st.write(f"**Username:** {user.username}")
st.write(f"**Role:** {user.role}")
st.write(f"**User ID:** {user.user_id if user.user_id is not None else '—'}")
if user.linked_staff_id is not None:
    st.write(f"**Linked Staff Profile:** #{user.linked_staff_id}")
else:
    st.caption("No staff profile is linked to this account.")

st.markdown("---")
if st.button("Log out"):
    logout_and_redirect()

render_footer()
