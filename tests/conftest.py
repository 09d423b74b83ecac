import json
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter

from core.config import Settings
from core.context import build_context
from models.user import SessionUser

BASE_URL = "http://api.test/api"


class FakeAdapter(BaseAdapter):
    """In-memory transport: canned responses keyed by (method, path)."""

    def __init__(self):
        super().__init__()
        self.routes = {}
        self.calls = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method.upper(), path)] = (status, body)

    def send(self, request, **kwargs):
        parts = urlsplit(request.url)
        path = parts.path[len(urlsplit(BASE_URL).path):]
        self.calls.append(Call(request, path, parts.query))

        route = self.routes.get((request.method, path))
        if route is None:
            status, body = 404, {"message": f"No route for {request.method} {path}"}
        elif callable(route[1]):
            status, body = route[0], route[1](request)
        else:
            status, body = route

        if isinstance(body, Exception):
            raise body

        response = requests.Response()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Error"
        response.url = request.url
        response.request = request
        response.encoding = "utf-8"
        response.headers["Content-Type"] = "application/json"
        response._content = json.dumps(body).encode() if body is not None else b""
        return response

    def close(self):
        pass


class Call:
    def __init__(self, request, path, query):
        self.method = request.method
        self.path = path
        self.params = {k: v[0] for k, v in parse_qs(query).items()}
        self.headers = request.headers
        self.json = json.loads(request.body) if request.body else None


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def settings():
    return Settings(api_base_url=BASE_URL, api_timeout=5, search_debounce_ms=500, log_level="DEBUG")


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ctx(settings, adapter, clock):
    http = requests.Session()
    http.mount("http://", adapter)
    context = build_context({}, settings=settings, http=http)
    context.cache.clock = clock
    return context


def make_user(role="Receptionist", linked_staff_id=None, username="jdoe"):
    return SessionUser(
        user_id=7,
        username=username,
        full_name="Jane Doe",
        role=role,
        linkedStaffId=linked_staff_id,
    )


@pytest.fixture
def logged_in(ctx):
    def login_as(role="Receptionist", linked_staff_id=None, token="tok-123"):
        ctx.session.start(make_user(role, linked_staff_id), token)
        return ctx
    return login_as
