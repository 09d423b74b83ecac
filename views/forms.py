from datetime import date, datetime

import streamlit as st

from core.validation import PATIENT_FORM, validate_form

GENDERS = ["Male", "Female", "Other"]


def _parse_date(value):
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def patient_form(form_key: str, patient=None, submit_label: str = "Save Patient", disabled: bool = False):
    """Add/edit patient form.

    Returns the submitted values when they pass validation, else None. Field
    errors are shown inline and the entered values stay in the form.
    """
    with st.form(form_key):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First Name *", value=getattr(patient, "first_name", "") or "")
        last_name = c2.text_input("Last Name *", value=getattr(patient, "last_name", "") or "")

        c3, c4 = st.columns(2)
        dob = c3.date_input(
            "Date of Birth *",
            value=_parse_date(getattr(patient, "date_of_birth", None)),
            min_value=date(1900, 1, 1),
            max_value=date.today(),
        )
        current_gender = getattr(patient, "gender", None)
        gender = c4.selectbox(
            "Gender *",
            GENDERS,
            index=GENDERS.index(current_gender) if current_gender in GENDERS else None,
            placeholder="Select gender...",
        )

        c5, c6 = st.columns(2)
        phone_number = c5.text_input("Phone Number", value=getattr(patient, "phone_number", "") or "")
        email = c6.text_input("Email", value=getattr(patient, "email", "") or "")
        address = st.text_area("Address", value=getattr(patient, "address", "") or "")

        c7, c8 = st.columns(2)
        ec_name = c7.text_input(
            "Emergency Contact Name", value=getattr(patient, "emergency_contact_name", "") or ""
        )
        ec_phone = c8.text_input(
            "Emergency Contact Phone", value=getattr(patient, "emergency_contact_phone", "") or ""
        )
        is_active = st.checkbox("Active", value=getattr(patient, "is_active", True))

        submitted = st.form_submit_button(submit_label, disabled=disabled)

    if not submitted:
        return None

    values = {
        "first_name": first_name,
        "last_name": last_name,
        "date_of_birth": dob,
        "gender": gender,
        "phone_number": phone_number,
        "email": email,
        "address": address,
        "emergency_contact_name": ec_name,
        "emergency_contact_phone": ec_phone,
        "is_active": is_active,
    }
    errors = validate_form(values, PATIENT_FORM)
    if errors:
        for message in errors.values():
            st.error(message)
        return None
    return values


def datetime_input(label: str, key: str, default=None, container=st):
    """Date + time pair; returns a naive datetime, or None when the date is empty."""
    default = default or datetime.now().replace(second=0, microsecond=0)
    c1, c2 = container.columns(2)
    day = c1.date_input(f"{label} (date)", value=default.date(), key=f"{key}_date")
    at = c2.time_input(f"{label} (time)", value=default.time(), key=f"{key}_time")
    if day is None or at is None:
        return None
    return datetime.combine(day, at)


# Forms that reset after a successful submit get a fresh key per version
def form_key(name: str) -> str:
    return f"{name}_{st.session_state.get(f'_form_version_{name}', 0)}"


def reset_form(name: str):
    version_key = f"_form_version_{name}"
    st.session_state[version_key] = st.session_state.get(version_key, 0) + 1
