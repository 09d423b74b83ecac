from datetime import date

from core.api_client import ApiClient
from core.query_cache import MutationResult, QueryKey, SCHEDULE_BOARD_POLICY
from core.status import (
    ACTIVE_APPOINTMENT_STATUSES,
    APPOINTMENT_FLOW,
    InvalidTransition,
)
from core.time_utils import format_api_date, format_api_datetime, sort_key_datetime
from models.appointment import Appointment

FILTER_NAMES = ("dateFrom", "dateTo", "doctorId", "status", "patientSearch")


def _filter_params(filters: dict | None) -> dict:
    params = {}
    for name, value in (filters or {}).items():
        if name not in FILTER_NAMES or value in (None, ""):
            continue
        if name in ("dateFrom", "dateTo"):
            value = format_api_date(value) if hasattr(value, "strftime") else value
        params[name] = value
    return params


# ------------------------------------------
# Cache keys
# ------------------------------------------
def appointments_key(filters: dict | None = None) -> QueryKey:
    return QueryKey.build("appointments", **_filter_params(filters))


def doctor_appointments_key(doctor_id, filters: dict | None = None) -> QueryKey:
    return QueryKey.build("doctorAppointments", doctor_id, **_filter_params(filters))


def todays_key(doctor_id, day: date | None = None) -> QueryKey:
    return QueryKey.build("todaysAppointmentsForDoctor", doctor_id, format_api_date(day or date.today()))


def patient_appointments_key(patient_id) -> QueryKey:
    return QueryKey.build("patientAppointments", int(patient_id))


# ------------------------------------------
# Fetchers
# ------------------------------------------
def _parse(rows) -> list[Appointment]:
    return [Appointment.model_validate(r) for r in rows or []]


def fetch_appointments(api: ApiClient, filters: dict | None = None) -> list[Appointment]:
    return _parse(api.get("/appointment", params=_filter_params(filters)))


def fetch_doctor_appointments(api: ApiClient, doctor_id, params: dict | None = None) -> list[Appointment]:
    return _parse(api.get(f"/appointment/doctor/{doctor_id}", params=params))


def fetch_todays_appointments(api: ApiClient, doctor_id, day: date | None = None) -> list[Appointment]:
    """Today's active appointments for a doctor, earliest first."""
    rows = fetch_doctor_appointments(api, doctor_id, {"date": format_api_date(day or date.today())})
    active = {s.value for s in ACTIVE_APPOINTMENT_STATUSES}
    rows = [a for a in rows if a.status in active]
    return sorted(rows, key=lambda a: sort_key_datetime(a.appointment_datetime))


def fetch_patient_appointments(api: ApiClient, patient_id) -> list[Appointment]:
    rows = _parse(api.get(f"/appointment/patient/{int(patient_id)}"))
    return sorted(rows, key=lambda a: sort_key_datetime(a.appointment_datetime), reverse=True)


# ------------------------------------------
# Cached reads
# ------------------------------------------
def list_appointments(ctx, filters: dict | None = None):
    return ctx.cache.fetch(appointments_key(filters), lambda: fetch_appointments(ctx.api, filters))


def list_doctor_appointments(ctx, doctor_id, filters: dict | None = None):
    return ctx.cache.fetch(
        doctor_appointments_key(doctor_id, filters),
        lambda: fetch_doctor_appointments(ctx.api, doctor_id, _filter_params(filters)),
        enabled=doctor_id is not None,
    )


def todays_appointments(ctx, doctor_id):
    return ctx.cache.fetch(
        todays_key(doctor_id),
        lambda: fetch_todays_appointments(ctx.api, doctor_id),
        policy=SCHEDULE_BOARD_POLICY,
        enabled=doctor_id is not None,
    )


def patient_appointments(ctx, patient_id, enabled: bool = True):
    return ctx.cache.fetch(
        patient_appointments_key(patient_id),
        lambda: fetch_patient_appointments(ctx.api, patient_id),
        enabled=enabled,
    )


# ------------------------------------------
# Mutations
# ------------------------------------------
def affected_keys(appointment: Appointment) -> list[QueryKey]:
    """Every key that lists this appointment."""
    keys = [QueryKey.build("appointments"), patient_appointments_key(appointment.patient_id)]
    if appointment.doctor_id is not None:
        keys.append(QueryKey.build("doctorAppointments", appointment.doctor_id))
        keys.append(QueryKey.build("todaysAppointmentsForDoctor", appointment.doctor_id))
    else:
        keys.append(QueryKey.build("doctorAppointments"))
        keys.append(QueryKey.build("todaysAppointmentsForDoctor"))
    return keys


def change_status(ctx, appointment: Appointment, target) -> MutationResult:
    try:
        target = APPOINTMENT_FLOW.validate(appointment.status, target)
    except InvalidTransition as e:
        return MutationResult(ok=False, error=str(e))

    return ctx.cache.mutate(
        f"appointment_status:{appointment.appointment_id}",
        lambda: ctx.api.put(
            f"/appointment/{appointment.appointment_id}/status",
            json={"status": target.value},
        ),
        invalidate=affected_keys(appointment),
        fallback_message="Failed to update appointment status.",
    )


def reschedule(ctx, appointment: Appointment, new_datetime) -> MutationResult:
    return ctx.cache.mutate(
        f"appointment_reschedule:{appointment.appointment_id}",
        lambda: ctx.api.put(
            f"/appointment/{appointment.appointment_id}/reschedule",
            json={"newDateTime": format_api_datetime(new_datetime)},
        ),
        invalidate=affected_keys(appointment),
        fallback_message="Failed to reschedule.",
    )


def create_appointment(ctx, values: dict) -> MutationResult:
    payload = {
        "patient_id": int(values["patient_id"]),
        "doctor_id": int(values["doctor_id"]),
        "appointment_datetime": format_api_datetime(values["appointment_datetime"]),
        "reason": (values.get("reason") or "").strip() or None,
    }
    pending = Appointment(appointment_id=0, patient_id=payload["patient_id"], doctor_id=payload["doctor_id"])
    return ctx.cache.mutate(
        "create_appointment",
        lambda: ctx.api.post("/appointment", json=payload),
        invalidate=affected_keys(pending),
        fallback_message="Failed to schedule appointment.",
    )
