from core.api_client import ApiClient
from core.query_cache import QueryKey, REFERENCE_POLICY
from models.patient import Patient

PATIENT_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "phone_number",
    "email",
    "address",
    "emergency_contact_name",
    "emergency_contact_phone",
    "is_active",
)


# ------------------------------------------
# Cache keys
# ------------------------------------------
def patients_key(search: str | None = None) -> QueryKey:
    return QueryKey.build("patients", search=(search or "").strip())


def patient_key(patient_id) -> QueryKey:
    return QueryKey.build("patient", int(patient_id))


def picker_key() -> QueryKey:
    return QueryKey.build("patientsForPicker")


# ------------------------------------------
# Fetchers
# ------------------------------------------
def fetch_patients(api: ApiClient, search: str | None = None) -> list[Patient]:
    rows = api.get("/patient", params={"search": (search or "").strip()}) or []
    return [Patient.model_validate(r) for r in rows]


def fetch_patient(api: ApiClient, patient_id) -> Patient:
    return Patient.model_validate(api.get(f"/patient/{int(patient_id)}"))


# ------------------------------------------
# Cached reads
# ------------------------------------------
def list_patients(ctx, search: str | None = None):
    return ctx.cache.fetch(patients_key(search), lambda: fetch_patients(ctx.api, search))


def load_patient(ctx, patient_id):
    return ctx.cache.fetch(
        patient_key(patient_id),
        lambda: fetch_patient(ctx.api, patient_id),
        enabled=patient_id is not None,
    )


def patient_options(ctx):
    """All patients for select boxes; reference data, cached for 10 minutes."""
    return ctx.cache.fetch(picker_key(), lambda: fetch_patients(ctx.api), policy=REFERENCE_POLICY)


# ------------------------------------------
# Mutations
# ------------------------------------------
def build_payload(values: dict) -> dict:
    payload = {}
    for name in PATIENT_FIELDS:
        if name not in values:
            continue
        value = values[name]
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        if isinstance(value, str):
            value = value.strip() or None
        payload[name] = value
    return payload


def _list_keys(patient_id=None):
    keys = [QueryKey.build("patients"), picker_key()]
    if patient_id is not None:
        keys.append(patient_key(patient_id))
    return keys


def create_patient(ctx, values: dict):
    return ctx.cache.mutate(
        "create_patient",
        lambda: ctx.api.post("/patient", json=build_payload(values)),
        invalidate=_list_keys(),
        fallback_message="Failed to register patient.",
    )


def update_patient(ctx, patient_id, values: dict):
    return ctx.cache.mutate(
        f"update_patient:{patient_id}",
        lambda: ctx.api.put(f"/patient/{int(patient_id)}", json=build_payload(values)),
        invalidate=_list_keys(patient_id),
        fallback_message="Failed to update patient details.",
    )


def delete_patient(ctx, patient_id):
    return ctx.cache.mutate(
        f"delete_patient:{patient_id}",
        lambda: ctx.api.delete(f"/patient/{int(patient_id)}"),
        invalidate=_list_keys(patient_id),
        fallback_message="Failed to delete patient.",
    )
