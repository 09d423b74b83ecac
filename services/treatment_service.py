from core.api_client import ApiClient
from core.query_cache import QueryKey
from core.time_utils import format_api_datetime, sort_key_datetime
from models.treatment import Treatment

TEXT_FIELDS = ("treatment_name", "diagnosis", "treatment_plan", "medications_prescribed", "notes")


def patient_treatments_key(patient_id) -> QueryKey:
    return QueryKey.build("patientTreatments", int(patient_id))


def fetch_patient_treatments(api: ApiClient, patient_id) -> list[Treatment]:
    rows = [Treatment.model_validate(r) for r in api.get(f"/treatment/patient/{int(patient_id)}") or []]
    return sorted(rows, key=lambda t: sort_key_datetime(t.start_datetime), reverse=True)


def patient_treatments(ctx, patient_id, enabled: bool = True):
    return ctx.cache.fetch(
        patient_treatments_key(patient_id),
        lambda: fetch_patient_treatments(ctx.api, patient_id),
        enabled=enabled,
    )


def build_payload(values: dict, staff_id) -> dict:
    payload = {name: (values.get(name) or "").strip() or None for name in TEXT_FIELDS}
    appointment_id = values.get("appointment_id")
    payload.update(
        patient_id=int(values["patient_id"]),
        doctor_id=int(staff_id),
        appointment_id=int(appointment_id) if appointment_id not in (None, "") else None,
        start_datetime=format_api_datetime(values.get("start_datetime")),
    )
    return payload


def log_treatment(ctx, values: dict, staff_id):
    """Record a treatment by the logged-in doctor/nurse (``staff_id``)."""
    payload = build_payload(values, staff_id)

    def invalidations(response):
        treatment = (response or {}).get("treatment") or {}
        patient_id = treatment.get("patient_id") or payload["patient_id"]
        return [
            patient_treatments_key(patient_id),
            QueryKey.build("todaysAppointmentsForDoctor"),
        ]

    return ctx.cache.mutate(
        "log_treatment",
        lambda: ctx.api.post("/treatment", json=payload),
        invalidate=invalidations,
        fallback_message="Failed to log treatment.",
    )
