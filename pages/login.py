import streamlit as st

from core.api_client import AuthError
from core.context import get_context
from core.helpers import go_to, hide_sidebar_completely
from core.session_manager import login


def main():
    st.set_page_config(page_title="Login", page_icon="🏥", initial_sidebar_state="collapsed")
    hide_sidebar_completely()

    ctx = get_context()

    if ctx.session.is_authenticated:
        go_to("/dashboard")

    st.title("Sign in")
    st.write("Please enter your credentials to continue.")

    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")

    if submitted:
        try:
            login(ctx, username, password)
        except AuthError as e:
            st.error(e.message)
        else:
            st.query_params.clear()
            go_to("/dashboard")

    if st.button("Back to Home"):
        go_to("/")


if __name__ == "__main__":
    main()
