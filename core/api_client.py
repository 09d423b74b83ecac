"""
HTTP client for the hospital API.

Every call attaches ``Authorization: Bearer <token>`` using the token held
by the session store at call time, so a logout takes effect on the very next
request. Non-2xx responses and transport failures are raised as ApiError
whose message is the server's ``message`` field when one is present.
"""

import logging
import requests

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None, payload=None, server_message: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload
        # The body's `message` field, verbatim; None when the server sent none
        self.server_message = server_message


class AuthError(ApiError):
    """Login was rejected; no session is created."""


def _server_message(response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("message")
        if not msg and isinstance(body.get("error"), dict):
            msg = body["error"].get("message")
        if isinstance(msg, str) and msg.strip():
            return msg
    return None


class ApiClient:
    def __init__(self, base_url: str, token_provider=None, timeout: float = 10, session=None,
                 on_unauthorized=None):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider or (lambda: None)
        # Called when the server rejects the bearer token we sent (401)
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout
        self.http = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, token=None) -> dict:
        headers = {"Accept": "application/json"}
        token = token or self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method: str, path: str, *, params=None, json=None, token=None):
        url = self._url(path)
        headers = self._headers(token)
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = self.http.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(f"Could not reach the server: {e}") from e

        if not response.ok:
            server_message = _server_message(response)
            message = server_message or GENERIC_ERROR_MESSAGE
            logger.info("%s %s -> %s: %s", method, path, response.status_code, message)
            if response.status_code == 401 and "Authorization" in headers and self.on_unauthorized:
                self.on_unauthorized()
            raise ApiError(
                message,
                status_code=response.status_code,
                payload=_safe_json(response),
                server_message=server_message,
            )

        if response.status_code == 204 or not response.content:
            return None
        return _safe_json(response)

    def get(self, path: str, params=None):
        return self.request("GET", path, params=params)

    def post(self, path: str, json=None, token=None):
        return self.request("POST", path, json=json, token=token)

    def put(self, path: str, json=None):
        return self.request("PUT", path, json=json)

    def delete(self, path: str):
        return self.request("DELETE", path)


def _safe_json(response):
    try:
        return response.json()
    except ValueError:
        return None
