# core/validation.py
from __future__ import annotations
import re
from typing import Dict

from core.models import Gender, NextOfKin, RegistrationForm

NEMIS_LENGTH = 11
EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match((value or "").strip()))


def _blank(value) -> bool:
    return not str(value or "").strip()


def validate_registration(form: RegistrationForm) -> Dict[str, str]:
    """
    Check a registration form. Returns {} when valid, else field -> message.
    Next-of-kin fields are keyed as "next_of_kin.<field>".
    """
    errors: Dict[str, str] = {}

    if _blank(form.full_name):
        errors["full_name"] = "Full name is required"
    if _blank(form.gender):
        errors["gender"] = "Gender is required"
    elif Gender.parse(form.gender) is None:
        errors["gender"] = "Gender must be Male or Female"
    if form.date_of_birth is None or _blank(form.date_of_birth):
        errors["date_of_birth"] = "Date of birth is required"
    if _blank(form.student_class):
        errors["student_class"] = "Class assignment is required"

    # length is checked on the value as entered; padding does not count as a digit
    nemis = form.nemis_number or ""
    if not nemis.strip():
        errors["nemis_number"] = "NEMIS number is required"
    elif len(nemis) != NEMIS_LENGTH:
        errors["nemis_number"] = f"NEMIS number must be exactly {NEMIS_LENGTH} characters"

    kin = form.next_of_kin
    if _blank(kin.name):
        errors["next_of_kin.name"] = "Guardian name is required"
    if _blank(kin.relationship):
        errors["next_of_kin.relationship"] = "Relationship is required"
    if _blank(kin.phone_number):
        errors["next_of_kin.phone_number"] = "Phone number is required"
    if _blank(kin.address):
        errors["next_of_kin.address"] = "Physical address is required"
    # email is optional at registration, but must look like one if given
    if not _blank(kin.email) and not is_valid_email(kin.email):
        errors["next_of_kin.email"] = "Email is invalid"

    return errors


def validate_next_of_kin(kin: NextOfKin) -> Dict[str, str]:
    """Edit-dialog rules: every field required, email format-checked."""
    errors: Dict[str, str] = {}
    if _blank(kin.name):
        errors["name"] = "Name is required"
    if _blank(kin.relationship):
        errors["relationship"] = "Relationship is required"
    if _blank(kin.phone_number):
        errors["phone_number"] = "Phone number is required"
    if _blank(kin.email):
        errors["email"] = "Email is required"
    elif not is_valid_email(kin.email):
        errors["email"] = "Email is invalid"
    if _blank(kin.address):
        errors["address"] = "Address is required"
    return errors
