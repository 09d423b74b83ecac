import threading

import pytest

from core.api_client import ApiError
from core.query_cache import (
    GENERIC_MUTATION_MESSAGE,
    QueryCache,
    QueryKey,
    QueryPolicy,
    REFERENCE_POLICY,
    UNEXPECTED_RESPONSE_MESSAGE,
)
from models.patient import Patient
from tests.conftest import FakeClock


@pytest.fixture
def cache(clock):
    return QueryCache(clock=clock)


class Counter:
    def __init__(self, value="data"):
        self.calls = 0
        self.value = value

    def __call__(self):
        self.calls += 1
        return self.value


# ----------------------------------------------
# Keys
# ----------------------------------------------
def test_build_drops_empty_params_and_sorts():
    key = QueryKey.build("appointments", status="Scheduled", doctorId=None, dateFrom="")
    assert key == QueryKey("appointments", (), (("status", "Scheduled"),))
    assert QueryKey.build("x", b=1, a=2).params == (("a", 2), ("b", 1))


def test_prefix_match():
    pattern = QueryKey.build("doctorAppointments", 4)
    assert pattern.matches(QueryKey.build("doctorAppointments", 4, status="Completed"))
    assert not pattern.matches(QueryKey.build("doctorAppointments", 5))
    assert not pattern.matches(QueryKey.build("appointments"))
    assert QueryKey.build("bills", paymentStatus="Paid").matches(QueryKey.build("bills", paymentStatus="Paid"))
    assert not QueryKey.build("bills", paymentStatus="Paid").matches(QueryKey.build("bills"))


# ----------------------------------------------
# Reads
# ----------------------------------------------
def test_distinct_filters_coexist(cache):
    scheduled = Counter(["a"])
    completed = Counter(["b"])
    k1 = QueryKey.build("appointments", status="Scheduled")
    k2 = QueryKey.build("appointments", status="Completed")

    assert cache.fetch(k1, scheduled).data == ["a"]
    assert cache.fetch(k2, completed).data == ["b"]

    again = cache.fetch(k1, scheduled)
    assert again.data == ["a"]
    assert again.from_cache
    assert scheduled.calls == 1


def test_disabled_query_never_fetches(cache):
    fetcher = Counter()
    result = cache.fetch(QueryKey.build("patientAppointments", 1), fetcher, enabled=False)
    assert fetcher.calls == 0
    assert result.data is None
    assert not result.enabled


def test_concurrent_reads_share_one_fetch(cache):
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow():
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return "shared"

    key = QueryKey.build("patients")
    results = []
    owner = threading.Thread(target=lambda: results.append(cache.fetch(key, slow)))
    owner.start()
    started.wait(timeout=5)
    joiner = threading.Thread(target=lambda: results.append(cache.fetch(key, slow)))
    joiner.start()
    release.set()
    owner.join(timeout=5)
    joiner.join(timeout=5)

    assert len(calls) == 1
    assert [r.data for r in results] == ["shared", "shared"]


def test_fetch_error_is_reported_and_retried(cache):
    def failing():
        raise ApiError("Server down", status_code=500)

    key = QueryKey.build("rooms")
    result = cache.fetch(key, failing)
    assert result.error_message == "Server down"
    assert not result.ok

    fetcher = Counter(["room"])
    assert cache.fetch(key, fetcher).data == ["room"]
    assert fetcher.calls == 1


def test_stale_time_and_refocus(cache, clock):
    ref = QueryKey.build("activeDoctors")
    normal = QueryKey.build("patients")
    ref_fetch, normal_fetch = Counter(), Counter()

    cache.fetch(ref, ref_fetch, policy=REFERENCE_POLICY)
    cache.fetch(normal, normal_fetch)

    cache.refocus()
    cache.fetch(ref, ref_fetch, policy=REFERENCE_POLICY)
    cache.fetch(normal, normal_fetch)
    assert ref_fetch.calls == 1
    assert normal_fetch.calls == 2

    clock.advance(10 * 60)
    cache.fetch(ref, ref_fetch, policy=REFERENCE_POLICY)
    assert ref_fetch.calls == 2


def test_refetch_interval(cache, clock):
    policy = QueryPolicy(refetch_interval=30)
    key = QueryKey.build("myActiveAssignments", 3)
    fetcher = Counter()
    cache.fetch(key, fetcher, policy=policy)
    clock.advance(29)
    cache.fetch(key, fetcher, policy=policy)
    assert fetcher.calls == 1
    clock.advance(1)
    cache.fetch(key, fetcher, policy=policy)
    assert fetcher.calls == 2


# ----------------------------------------------
# Invalidation
# ----------------------------------------------
def test_invalidate_by_prefix(cache):
    keys = [
        QueryKey.build("appointments"),
        QueryKey.build("appointments", status="Scheduled"),
        QueryKey.build("patients"),
    ]
    for key in keys:
        cache.fetch(key, Counter())

    hit = cache.invalidate(QueryKey.build("appointments"))
    assert set(hit) == set(keys[:2])
    assert cache.is_stale(cache.entry(keys[0]))
    assert not cache.is_stale(cache.entry(keys[2]))


def test_late_response_after_invalidation_stays_stale(cache):
    key = QueryKey.build("patients")

    def fetch_then_get_invalidated():
        cache.invalidate(QueryKey.build("patients"))
        return ["old"]

    result = cache.fetch(key, fetch_then_get_invalidated)
    assert result.data == ["old"]
    assert cache.entry(key).invalidated

    fresh = Counter(["new"])
    assert cache.fetch(key, fresh).data == ["new"]
    assert fresh.calls == 1


# ----------------------------------------------
# Mutations
# ----------------------------------------------
def test_mutation_success_invalidates(cache):
    key = QueryKey.build("patients")
    cache.fetch(key, Counter())
    result = cache.mutate("create_patient", lambda: {"patient_id": 9}, invalidate=[QueryKey.build("patients")])
    assert result.ok
    assert result.data == {"patient_id": 9}
    assert result.invalidated == [key]


def test_mutation_invalidation_can_depend_on_response(cache):
    key = QueryKey.build("patientAdmissions", 12)
    cache.fetch(key, Counter())
    result = cache.mutate(
        "admit",
        lambda: {"admission": {"patient_id": 12}},
        invalidate=lambda body: [QueryKey.build("patientAdmissions", body["admission"]["patient_id"])],
    )
    assert result.invalidated == [key]


def test_failed_mutation_leaves_cache_untouched(cache):
    key = QueryKey.build("appointments")
    cache.fetch(key, Counter())

    def rejected():
        raise ApiError("Slot taken", status_code=409, server_message="Slot taken")

    result = cache.mutate("create_appointment", rejected, invalidate=[QueryKey.build("appointments")])
    assert not result.ok
    assert result.error == "Slot taken"
    assert not cache.entry(key).invalidated


def test_failed_mutation_without_server_message_uses_fallback(cache):
    def broken():
        raise ApiError("Could not reach the server: boom")

    assert cache.mutate("a", broken).error == GENERIC_MUTATION_MESSAGE
    assert cache.mutate("b", broken, fallback_message="Failed to admit patient.").error == "Failed to admit patient."


def test_malformed_read_is_an_error_not_a_crash(cache):
    key = QueryKey.build("patients")
    result = cache.fetch(key, lambda: Patient.model_validate({"patient_id": 1, "first_name": "Jane", "last_name": None}))
    assert result.error_message == UNEXPECTED_RESPONSE_MESSAGE
    assert result.data is None


def test_malformed_write_response_uses_fallback(cache):
    key = QueryKey.build("patients")
    cache.fetch(key, Counter())
    result = cache.mutate(
        "create_patient",
        lambda: Patient.model_validate({"first_name": "Jane"}),
        invalidate=[QueryKey.build("patients")],
        fallback_message="Failed to register patient.",
    )
    assert result.error == "Failed to register patient."
    assert not cache.entry(key).invalidated


def test_same_mutation_cannot_run_twice(cache):
    inner = {}

    def outer():
        inner["result"] = cache.mutate("pay:1", lambda: None)
        return "done"

    result = cache.mutate("pay:1", outer)
    assert result.ok
    assert not inner["result"].ok
    assert not cache.is_mutating("pay:1")


def test_clear_forgets_everything():
    cache = QueryCache(clock=FakeClock())
    cache.fetch(QueryKey.build("patients"), Counter())
    cache.clear()
    assert cache.keys() == []
