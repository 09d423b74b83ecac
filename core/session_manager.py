import logging
import streamlit as st

from core.api_client import ApiError, AuthError
from models.user import SessionUser

logger = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"


class SessionStore:
    """Authenticated user + bearer token kept in a mutable mapping.

    At runtime the mapping is ``st.session_state`` (one per browser tab);
    tests pass a plain dict.
    """

    def __init__(self, state):
        self.state = state

    def init(self):
        """Ensure required session keys exist."""
        if USER_KEY not in self.state:
            self.state[USER_KEY] = None
        if TOKEN_KEY not in self.state:
            self.state[TOKEN_KEY] = None

    def start(self, user: SessionUser, token: str):
        self.state[USER_KEY] = user
        self.state[TOKEN_KEY] = token

    def clear(self):
        self.state[USER_KEY] = None
        self.state[TOKEN_KEY] = None

    @property
    def current_user(self) -> SessionUser | None:
        return self.state.get(USER_KEY)

    @property
    def token(self) -> str | None:
        return self.state.get(TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None and bool(self.token)

    @property
    def role(self) -> str | None:
        user = self.current_user
        return user.role if user else None


def login(ctx, username: str, password: str, notify=None) -> SessionUser:
    """Authenticate against the API and start the session.

    Raises AuthError on rejection; the session is left untouched.
    """
    from services import auth_service

    notify = notify or _toast
    try:
        user, token = auth_service.login(ctx.api, username, password)
    except AuthError as e:
        logger.info("Login rejected for %s", username)
        notify(e.message, "error")
        raise

    ctx.session.start(user, token)
    ctx.cache.clear()
    logger.info("User %s logged in as %s", user.username, user.role)
    notify(f"Welcome, {user.display_name}!", "success")
    return user


def logout(ctx, notify=None):
    """Clear the session unconditionally, then tell the server.

    A failing server-side logout is reported but never keeps the user logged in.
    """
    from services import auth_service

    notify = notify or _toast
    token = ctx.session.token
    username = getattr(ctx.session.current_user, "username", None)

    ctx.session.clear()
    ctx.cache.clear()
    logger.info("User %s logged out", username)

    if token:
        try:
            auth_service.logout(ctx.api, token)
        except ApiError as e:
            logger.warning("Server-side logout failed: %s", e.message)
            notify("Logged out locally; the server could not be reached.", "warning")
            return
    notify("Logged out successfully.", "success")


def expire_session(ctx):
    """The server rejected the session token: drop the session as logout does.

    The server is not called; the token is already dead.
    """
    username = getattr(ctx.session.current_user, "username", None)
    ctx.session.clear()
    ctx.cache.clear()
    logger.info("Session for %s expired; signed out", username)


def _toast(message: str, kind: str = "info"):
    from core.helpers import notify
    notify(message, kind)


# -----------------------------
# Streamlit wiring
# -----------------------------
def logout_and_redirect():
    """Logout from a page and send the user to the login screen."""
    from core.context import get_context
    from core.routes import page_for

    logout(get_context())
    st.switch_page(page_for("/login"))


def require_route(path: str):
    """Run the guard chain for ``path``; redirect and stop when a gate fails."""
    from core.context import get_context
    from core.routes import check_access, page_for

    ctx = get_context()
    ctx.session.init()
    redirect = check_access(path, ctx.session)
    if redirect is not None:
        logger.debug("Access to %s denied; redirecting to %s", path, redirect)
        st.switch_page(page_for(redirect))
        st.stop()
    return ctx
