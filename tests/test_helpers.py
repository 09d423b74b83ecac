import pytest

import core.context
from core import helpers
from core.api_client import ApiError
from core.query_cache import MutationResult, QueryKey, QueryResult


class Screen:
    """Records what the helpers would draw instead of calling Streamlit."""

    def __init__(self):
        self.errors = []
        self.toasts = []
        self.pages = []

    def error(self, message):
        self.errors.append(message)


@pytest.fixture
def screen(monkeypatch, ctx):
    shown = Screen()
    monkeypatch.setattr(helpers.st, "error", shown.error)
    monkeypatch.setattr(helpers, "notify", lambda message, kind="info": shown.toasts.append((kind, message)))
    monkeypatch.setattr(helpers, "go_to", shown.pages.append)
    monkeypatch.setattr(core.context, "get_context", lambda: ctx)
    return shown


def test_query_error_is_shown_with_its_label(screen, logged_in):
    logged_in("Receptionist")
    result = QueryResult(error=ApiError("Server down", status_code=500))

    assert helpers.show_query_error(result, "Doctors")
    assert screen.errors == ["Doctors: Server down"]
    assert screen.pages == []


def test_successful_query_draws_nothing(screen):
    assert not helpers.show_query_error(QueryResult(data=[]), "Doctors")
    assert screen.errors == []


def test_expired_session_on_read_goes_to_login(screen, logged_in, adapter):
    ctx = logged_in("Receptionist")
    adapter.add("GET", "/patient", {"message": "Token expired"}, status=401)
    result = ctx.cache.fetch(QueryKey.build("patients"), lambda: ctx.api.get("/patient"))

    helpers.show_query_error(result, "Patients")

    assert screen.pages == ["/login"]
    assert ("warning", helpers.SESSION_EXPIRED_MESSAGE) in screen.toasts


def test_failed_mutation_while_signed_in_stays_on_page(screen, logged_in):
    logged_in("Admin")
    assert not helpers.show_mutation_result(MutationResult(ok=False, error="Room is full"), "Saved")
    assert screen.pages == []
    assert screen.errors == ["Room is full"]


def test_failed_mutation_after_expiry_goes_to_login(screen, ctx):
    helpers.show_mutation_result(MutationResult(ok=False, error="Token expired"), "Saved")
    assert screen.pages == ["/login"]
