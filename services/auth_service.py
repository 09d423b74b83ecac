from pydantic import ValidationError

from core.api_client import ApiClient, ApiError, AuthError
from models.user import SessionUser

INVALID_CREDENTIALS = "Invalid credentials. Try again."


def login(api: ApiClient, username: str, password: str):
    """Exchange credentials for (SessionUser, bearer token).

    Every failure, rejected credentials or an unreachable server, is raised
    as AuthError so the login page has a single error path.
    """
    username = (username or "").strip()
    if not username or not password:
        raise AuthError("Username and password are required.")

    try:
        body = api.post("/auth/login", json={"username": username, "password": password})
    except ApiError as e:
        if e.status_code in (400, 401, 403):
            raise AuthError(e.server_message or INVALID_CREDENTIALS, status_code=e.status_code,
                            server_message=e.server_message) from e
        raise AuthError(e.message, status_code=e.status_code, server_message=e.server_message) from e

    if not isinstance(body, dict):
        body = {}
    token = body.get("token") or body.get("accessToken")
    user_data = body.get("user")
    if not token or not isinstance(user_data, dict):
        raise AuthError("The server returned an incomplete login response.")

    try:
        user = SessionUser.model_validate(user_data)
    except ValidationError as e:
        raise AuthError("The server returned an incomplete login response.", payload=e.errors()) from e
    return user, token


def logout(api: ApiClient, token: str):
    """Tell the server the token is no longer in use."""
    api.post("/auth/logout", token=token)
