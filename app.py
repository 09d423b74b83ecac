import streamlit as st

from core.config import configure_logging
from core.context import get_context
from core.helpers import go_to, hide_sidebar_completely, render_footer
from core.session_manager import logout


def main():
    st.set_page_config(
        page_title="Hospital MS",
        page_icon="🏥",
        layout="wide",
        initial_sidebar_state="collapsed",
    )
    configure_logging()

    ctx = get_context()
    hide_sidebar_completely()

    user = ctx.session.current_user

    cols = st.columns([4, 2])
    with cols[0]:
        st.title("Hospital Management System")
    with cols[1]:
        if ctx.session.is_authenticated:
            st.info(f"Logged in as: **{user.display_name}** ({user.role})")
            if st.button("Log out"):
                logout(ctx)
                st.rerun()

    st.write("---")

    st.subheader("Care, coordinated.")
    st.write(
        "Patients, appointments, admissions, treatments, staff tasks and billing "
        "in one place, with a workspace tailored to your role."
    )

    c1, c2, c3 = st.columns(3)
    with c1:
        st.markdown("### Front Desk")
        st.caption("Register patients, schedule and manage appointments, admit patients.")
    with c2:
        st.markdown("### Clinical Staff")
        st.caption("Daily schedules, treatment logs and ward task boards.")
    with c3:
        st.markdown("### Administration")
        st.caption("Staff, rooms, services and billing oversight.")

    st.write("---")

    if ctx.session.is_authenticated:
        if st.button("Go to Dashboard", type="primary"):
            go_to("/dashboard")
    else:
        if st.button("Login", type="primary"):
            go_to("/login")

    render_footer()


if __name__ == "__main__":
    main()
