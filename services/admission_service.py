from core.api_client import ApiClient
from core.query_cache import QueryKey
from core.time_utils import format_api_datetime
from models.admission import Admission
from services.room_service import available_rooms_key, rooms_key


def admissions_key() -> QueryKey:
    return QueryKey.build("admissions", status="active")


def patient_admissions_key(patient_id) -> QueryKey:
    return QueryKey.build("patientAdmissions", int(patient_id))


def fetch_active_admissions(api: ApiClient) -> list[Admission]:
    rows = api.get("/admission", params={"status": "active"}) or []
    return [Admission.model_validate(r) for r in rows]


def fetch_patient_admissions(api: ApiClient, patient_id) -> list[Admission]:
    rows = api.get(f"/admission/patient/{int(patient_id)}") or []
    return [Admission.model_validate(r) for r in rows]


def active_admissions(ctx):
    return ctx.cache.fetch(admissions_key(), lambda: fetch_active_admissions(ctx.api))


def patient_admissions(ctx, patient_id, enabled: bool = True):
    return ctx.cache.fetch(
        patient_admissions_key(patient_id),
        lambda: fetch_patient_admissions(ctx.api, patient_id),
        enabled=enabled,
    )


def build_payload(values: dict) -> dict:
    return {
        "patient_id": int(values["patient_id"]),
        "room_id": int(values["room_id"]),
        "admitting_doctor_id": int(values["admitting_doctor_id"]),
        "admission_datetime": format_api_datetime(values.get("admission_datetime")),
        "reason_for_admission": (values.get("reason_for_admission") or "").strip() or None,
    }


def admitted_patient_id(response, payload: dict) -> int:
    admission = (response or {}).get("admission") or {}
    return int(admission.get("patient_id") or payload["patient_id"])


def admit_patient(ctx, values: dict):
    payload = build_payload(values)

    def invalidations(response):
        return [
            rooms_key(),
            available_rooms_key(),
            QueryKey.build("admissions"),
            QueryKey.build("adminStats"),
            patient_admissions_key(admitted_patient_id(response, payload)),
        ]

    return ctx.cache.mutate(
        "admit_patient",
        lambda: ctx.api.post("/admission", json=payload),
        invalidate=invalidations,
        fallback_message="Failed to admit patient.",
    )
