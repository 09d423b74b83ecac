import time
from datetime import date, datetime

from core.query_cache import QueryKey
from core.status import AppointmentStatus, AssignmentStatus
from models.admission import Room
from models.appointment import Appointment
from models.assignment import Assignment
from services import (
    admission_service,
    appointment_service,
    assignment_service,
    billing_service,
    patient_service,
    room_service,
    staff_service,
    treatment_service,
)

PATIENT = {"patient_id": 1, "first_name": "Jane", "last_name": "Doe", "date_of_birth": "1990-05-01"}


# ----------------------------------------------
# Patients
# ----------------------------------------------
def test_patient_search_is_cached_per_term(logged_in, adapter):
    ctx = logged_in("Receptionist")
    adapter.add("GET", "/patient", [PATIENT])

    first = patient_service.list_patients(ctx, "Jane")
    patient_service.list_patients(ctx, " Jane ")
    patient_service.list_patients(ctx, "")

    assert first.data[0].full_name == "Jane Doe"
    assert [c.params for c in adapter.calls] == [{"search": "Jane"}, {}]
    assert adapter.calls[0].headers["Authorization"] == "Bearer tok-123"


def test_malformed_patient_rows_become_a_read_error(logged_in, adapter):
    ctx = logged_in("Receptionist")
    adapter.add("GET", "/patient", [{"patient_id": 1, "first_name": "Jane", "last_name": None}])

    result = patient_service.list_patients(ctx)

    assert result.data is None
    assert result.error_message == "The server returned an unexpected response."
    assert ctx.session.is_authenticated


def test_update_patient_invalidates_list_and_record(logged_in, adapter):
    ctx = logged_in("Admin")
    adapter.add("GET", "/patient", [PATIENT])
    adapter.add("GET", "/patient/1", PATIENT)
    adapter.add("PUT", "/patient/1", {"message": "ok"})
    patient_service.list_patients(ctx, "Jane")
    patient_service.load_patient(ctx, 1)

    result = patient_service.update_patient(ctx, 1, {"first_name": " Janet ", "date_of_birth": date(1990, 5, 1)})

    assert result.ok
    assert set(result.invalidated) == {patient_service.patients_key("Jane"), patient_service.patient_key(1)}
    assert adapter.calls[-1].json == {"first_name": "Janet", "date_of_birth": "1990-05-01"}


def test_failed_delete_keeps_cache(logged_in, adapter):
    ctx = logged_in("Admin")
    adapter.add("GET", "/patient", [PATIENT])
    adapter.add("DELETE", "/patient/1", {"message": "Patient has active admissions"}, status=400)
    patient_service.list_patients(ctx)

    result = patient_service.delete_patient(ctx, 1)

    assert not result.ok
    assert result.error == "Patient has active admissions"
    assert not ctx.cache.entry(patient_service.patients_key()).invalidated


def test_dependent_queries_wait_for_patient(logged_in, adapter):
    ctx = logged_in("Doctor", 4)
    result = appointment_service.patient_appointments(ctx, 1, enabled=False)
    treatment_service.patient_treatments(ctx, 1, enabled=False)
    admission_service.patient_admissions(ctx, 1, enabled=False)
    assert not result.enabled
    assert adapter.calls == []


# ----------------------------------------------
# Appointments
# ----------------------------------------------
def test_filters_become_query_params(logged_in, adapter):
    ctx = logged_in("Receptionist")
    adapter.add("GET", "/appointment", [])
    appointment_service.list_appointments(
        ctx, {"dateFrom": date(2026, 1, 2), "status": "Scheduled", "doctorId": None, "bogus": "x"}
    )
    assert adapter.calls[0].params == {"dateFrom": "2026-01-02", "status": "Scheduled"}


def test_todays_board_keeps_active_sorted(logged_in, adapter):
    ctx = logged_in("Doctor", 4)
    adapter.add("GET", "/appointment/doctor/4", [
        {"appointment_id": 1, "patient_id": 1, "doctor_id": 4, "appointment_datetime": "2026-01-02T11:00:00",
         "status": "Scheduled"},
        {"appointment_id": 2, "patient_id": 2, "doctor_id": 4, "appointment_datetime": "2026-01-02T09:00:00",
         "status": "Checked-In"},
        {"appointment_id": 3, "patient_id": 3, "doctor_id": 4, "appointment_datetime": "2026-01-02T08:00:00",
         "status": "Completed"},
    ])
    result = appointment_service.todays_appointments(ctx, 4)
    assert [a.appointment_id for a in result.data] == [2, 1]
    assert "date" in adapter.calls[0].params


def test_status_change_invalidates_every_view_of_the_appointment(logged_in, adapter):
    ctx = logged_in("Doctor", 4)
    appt = Appointment(appointment_id=9, patient_id=1, doctor_id=4, status="Checked-In")
    adapter.add("PUT", "/appointment/9/status", {"message": "updated"})
    for key in (
        appointment_service.appointments_key({"status": "Checked-In"}),
        appointment_service.patient_appointments_key(1),
        appointment_service.doctor_appointments_key(4),
        appointment_service.todays_key(4),
        appointment_service.patient_appointments_key(2),
    ):
        ctx.cache.fetch(key, lambda: [])

    result = appointment_service.change_status(ctx, appt, AppointmentStatus.IN_PROGRESS)

    assert result.ok
    assert adapter.calls[-1].json == {"status": "In Progress"}
    assert len(result.invalidated) == 4
    assert appointment_service.patient_appointments_key(2) not in result.invalidated


def test_illegal_status_change_never_calls_server(logged_in, adapter):
    ctx = logged_in("Doctor", 4)
    appt = Appointment(appointment_id=9, patient_id=1, doctor_id=4, status="Scheduled")
    result = appointment_service.change_status(ctx, appt, AppointmentStatus.COMPLETED)
    assert not result.ok
    assert adapter.calls == []


def test_reschedule_payload(logged_in, adapter):
    ctx = logged_in("Receptionist")
    appt = Appointment(appointment_id=9, patient_id=1, doctor_id=4)
    adapter.add("PUT", "/appointment/9/reschedule", {})
    appointment_service.reschedule(ctx, appt, datetime(2026, 3, 4, 14, 30))
    assert adapter.calls[0].json == {"newDateTime": "2026-03-04T14:30:00"}


# ----------------------------------------------
# Rooms and admissions
# ----------------------------------------------
def test_full_rooms_are_not_selectable():
    free = Room(room_id=1, room_number="101", capacity=2, current_occupancy=1)
    full = Room(room_id=2, room_number="102", capacity=2, current_occupancy=2)
    closed = Room(room_id=3, room_number="103", capacity=2, current_occupancy=0, is_available=False)
    assert free.selectable
    assert full.is_full and not full.selectable
    assert not closed.selectable
    assert room_service.occupied_beds([free, full, closed]) == 3


def test_admission_invalidates_rooms_and_patient(logged_in, adapter):
    ctx = logged_in("Receptionist")
    adapter.add("GET", "/room", [{"room_id": 1, "room_number": "101", "capacity": 2}])
    adapter.add("POST", "/admission", {"admission": {"admission_id": 5, "patient_id": 1}})
    room_service.list_rooms(ctx)
    room_service.room_choices(ctx)
    admission_service.patient_admissions(ctx, 1, enabled=False)
    ctx.cache.fetch(admission_service.patient_admissions_key(1), lambda: [])

    result = admission_service.admit_patient(ctx, {
        "patient_id": 1,
        "room_id": 1,
        "admitting_doctor_id": 4,
        "admission_datetime": datetime(2026, 1, 2, 10, 0),
        "reason_for_admission": "  ",
    })

    assert result.ok
    assert set(result.invalidated) == {
        room_service.rooms_key(),
        room_service.available_rooms_key(),
        admission_service.patient_admissions_key(1),
    }
    assert adapter.calls[-1].json["reason_for_admission"] is None
    assert adapter.calls[0].params == {"is_active": "true"}


# ----------------------------------------------
# Treatments and assignments
# ----------------------------------------------
def test_log_treatment_uses_own_staff_id(logged_in, adapter):
    ctx = logged_in("Doctor", 4)
    adapter.add("POST", "/treatment", {"treatment": {"treatment_id": 1, "patient_id": 1}})
    ctx.cache.fetch(treatment_service.patient_treatments_key(1), lambda: [])

    result = treatment_service.log_treatment(ctx, {
        "patient_id": 1,
        "appointment_id": None,
        "treatment_name": "Rest",
        "diagnosis": "Flu",
        "start_datetime": datetime(2026, 1, 2, 9, 0),
    }, 4)

    body = adapter.calls[0].json
    assert body["doctor_id"] == 4
    assert body["appointment_id"] is None
    assert body["treatment_plan"] is None
    assert result.invalidated == [treatment_service.patient_treatments_key(1)]


def test_tasks_sort_by_start_then_pending_first():
    tasks = [
        Assignment(assignment_id=1, status="In Progress", assignment_start_datetime="2026-01-02T09:00:00"),
        Assignment(assignment_id=2, status="Pending", assignment_start_datetime="2026-01-02T09:00:00"),
        Assignment(assignment_id=3, status="Pending", assignment_start_datetime="2026-01-02T08:00:00"),
    ]
    assert [t.assignment_id for t in assignment_service.sort_tasks(tasks)] == [3, 2, 1]


def test_completing_a_task_stamps_end_time(logged_in, adapter):
    ctx = logged_in("Nurse", 5)
    adapter.add("PUT", "/assignment/8/status", {})
    task = Assignment(assignment_id=8, status="In Progress")

    result = assignment_service.change_status(ctx, task, AssignmentStatus.COMPLETED, 5)

    assert result.ok
    body = adapter.calls[0].json
    assert body["status"] == "Completed"
    stamped = datetime.strptime(body["end_datetime"], "%Y-%m-%dT%H:%M:%S")
    assert abs((datetime.now() - stamped).total_seconds()) < 5


def test_end_time_is_local_wall_clock(monkeypatch):
    monkeypatch.setenv("TZ", "America/New_York")
    if hasattr(time, "tzset"):
        time.tzset()
    try:
        payload = assignment_service.status_payload(AssignmentStatus.COMPLETED)
        stamped = datetime.strptime(payload["end_datetime"], "%Y-%m-%dT%H:%M:%S")
        assert abs((datetime.now() - stamped).total_seconds()) < 5
    finally:
        monkeypatch.undo()
        if hasattr(time, "tzset"):
            time.tzset()


def test_starting_a_task_sends_status_only():
    assert assignment_service.status_payload(AssignmentStatus.IN_PROGRESS) == {"status": "In Progress"}


def test_assignment_targets_ward_boy_field(logged_in, adapter):
    ctx = logged_in("Nurse", 5)
    adapter.add("POST", "/assignment", {})
    assignment_service.create_assignment(ctx, {
        "patient_id": 1,
        "staff": ("WardBoy", 12),
        "task_description": " Move patient ",
        "assignment_start_datetime": datetime(2026, 1, 2, 9, 0),
    })
    body = adapter.calls[0].json
    assert body["ward_boy_id"] == 12
    assert "nurse_id" not in body
    assert body["task_description"] == "Move patient"
    assert body["status"] == "Pending"


# ----------------------------------------------
# Billing and stats
# ----------------------------------------------
def test_billing_stats(logged_in, adapter):
    ctx = logged_in("BillingStaff")

    def bills(request):
        if "Overdue" in request.url:
            return [{"bill_id": 3, "patient_id": 1, "total_amount": 10}]
        return [
            {"bill_id": 1, "patient_id": 1, "total_amount": 100, "amount_paid": 40},
            {"bill_id": 2, "patient_id": 2, "total_amount": 50.5},
        ]

    adapter.add("GET", "/bill", bills)
    adapter.add("GET", "/payment/summary", {"totalAmountToday": "75.25"})

    stats = billing_service.billing_stats(ctx).data

    assert stats.pending_bills == 2
    assert stats.overdue_bills == 1
    assert stats.total_outstanding == 110.5
    assert stats.payments_today == 75.25


def test_generate_bill_formats_dates(logged_in, adapter):
    ctx = logged_in("BillingStaff")
    adapter.add("POST", "/bill", {"bill": {"bill_id": 1}})
    billing_service.generate_bill(ctx, {
        "patient_id": 1,
        "total_amount": "12.5",
        "bill_date": date(2026, 1, 2),
        "due_date": date(2026, 2, 1),
    })
    assert adapter.calls[0].json == {
        "patient_id": 1,
        "total_amount": 12.5,
        "bill_date": "2026-01-02",
        "due_date": "2026-02-01",
    }


def test_payment_invalidates_bill(logged_in, adapter):
    ctx = logged_in("BillingStaff")
    adapter.add("GET", "/bill/4", {"bill_id": 4, "patient_id": 1, "total_amount": 20})
    adapter.add("POST", "/payment", {})
    billing_service.load_bill(ctx, 4)

    result = billing_service.record_payment(ctx, {"bill_id": 4, "amount": 5, "payment_method": "Cash"})

    assert billing_service.bill_key(4) in result.invalidated


def test_admin_stats_count_rooms_and_beds(logged_in, adapter):
    ctx = logged_in("Admin")
    adapter.add("GET", "/users", [{}, {}])
    adapter.add("GET", "/patient", [PATIENT])
    adapter.add("GET", "/doctor", [{"doctor_id": 1, "first_name": "A", "last_name": "B"}])
    adapter.add("GET", "/nurse", [])
    adapter.add("GET", "/wardboy", [])
    adapter.add("GET", "/room", [
        {"room_id": 1, "room_number": "101", "capacity": 2, "current_occupancy": 2},
        {"room_id": 2, "room_number": "102", "capacity": 4, "current_occupancy": 1},
    ])
    adapter.add("GET", "/appointment", [{}])
    adapter.add("GET", "/admission", [{}, {}, {}])

    stats = staff_service.admin_stats(ctx).data

    assert stats.total_users == 2
    assert stats.total_doctors == 1
    assert stats.total_rooms == 2
    assert stats.occupied_beds == 3
    assert stats.active_admissions == 3
    assert ctx.cache.entry(QueryKey.build("adminStats")) is not None
