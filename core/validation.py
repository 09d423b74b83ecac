"""
Form field validation run before any network call.

Rules are small callables returning an error message or None. A form is a
mapping of field name -> (label, rules); ``validate_form`` returns the first
failing message per field.
"""

import re

EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"^[0-9\s+-]{9,15}$")


class ValidationError(Exception):
    def __init__(self, errors: dict):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def required(label: str):
    def rule(value):
        if _is_blank(value):
            return f"{label} is required."
        return None
    return rule


def pattern(regex, message: str):
    compiled = re.compile(regex) if isinstance(regex, str) else regex

    def rule(value):
        # Optional fields: blank values are left to `required`
        if _is_blank(value):
            return None
        if not compiled.match(str(value).strip()):
            return message
        return None
    return rule


def email():
    return pattern(EMAIL_PATTERN, "Invalid email address")


def phone():
    return pattern(PHONE_PATTERN, "Invalid phone number format.")


def number_range(label: str, min_value=None, max_value=None):
    def rule(value):
        if _is_blank(value):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return f"{label} must be a number."
        if min_value is not None and number < min_value:
            return f"{label} must be at least {min_value}."
        if max_value is not None and number > max_value:
            return f"{label} must be at most {max_value}."
        return None
    return rule


def validate_field(value, rules) -> str | None:
    for rule in rules:
        message = rule(value)
        if message:
            return message
    return None


def validate_form(values: dict, schema: dict) -> dict:
    """Return {field: message} for failing fields; empty when valid."""
    errors = {}
    for name, rules in schema.items():
        message = validate_field(values.get(name), rules)
        if message:
            errors[name] = message
    return errors


def ensure_valid(values: dict, schema: dict):
    errors = validate_form(values, schema)
    if errors:
        raise ValidationError(errors)
    return values


# -----------------------------
# Form schemas shared by pages
# -----------------------------
PATIENT_FORM = {
    "first_name": [required("First Name")],
    "last_name": [required("Last Name")],
    "date_of_birth": [required("Date of Birth")],
    "gender": [required("Gender")],
    "phone_number": [phone()],
    "email": [email()],
    "emergency_contact_phone": [phone()],
}

APPOINTMENT_FORM = {
    "patient_id": [required("Patient")],
    "doctor_id": [required("Doctor")],
    "appointment_datetime": [required("Appointment Date & Time")],
    "reason": [required("Reason for Visit")],
}

ADMISSION_FORM = {
    "patient_id": [required("Patient")],
    "room_id": [required("Room")],
    "admitting_doctor_id": [required("Admitting Doctor")],
    "admission_datetime": [required("Admission Date & Time")],
}

TREATMENT_FORM = {
    "patient_id": [required("Patient")],
    "treatment_name": [required("Treatment Name")],
    "diagnosis": [required("Diagnosis")],
    "start_datetime": [required("Start Date & Time")],
}

ASSIGNMENT_FORM = {
    "patient_id": [required("Patient")],
    "staff": [required("Staff Member")],
    "task_description": [required("Task Description")],
    "assignment_start_datetime": [required("Start Date & Time")],
}

BILL_FORM = {
    "patient_id": [required("Patient")],
    "total_amount": [required("Total Amount"), number_range("Total Amount", min_value=0.01)],
}


def payment_form(outstanding: float) -> dict:
    return {
        "bill_id": [required("Bill")],
        "amount": [
            required("Amount"),
            number_range("Amount", min_value=0.01, max_value=round(outstanding, 2)),
        ],
        "payment_method": [required("Payment Method")],
    }
