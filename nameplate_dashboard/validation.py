# nameplate_dashboard/validation.py
"""
Field checks shared by the Record API and the editor.
"""
import re
from typing import Any, Dict, List, Mapping, Sequence, Tuple

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
MOBILE_PATTERN = re.compile(r"^\d{10,15}$")

INVALID_EMAIL = "Invalid email format"
INVALID_MOBILE = "Mobile number must be 10-15 digits"

# Keys of the createNameplate payload that must be present and non-empty
REQUIRED_NAMEPLATE_FIELDS: Tuple[str, ...] = (
    "theme",
    "background",
    "houseName",
    "ownerName",
    "address",
    "rmo",
    "officer",
    "lot",
    "officer_name",
    "email",
)

# Optional keys that, when sent, must be text like the required ones
OPTIONAL_TEXT_FIELDS: Tuple[str, ...] = (
    "spouseName",
    "textColor",
    "houseNameColor",
    "ownerNameColor",
    "addressColor",
    "designation",
    "mobileNumber",
    "mobile_number",
    "imageUrl",
    "image_url",
)

# Draft attribute -> message, in the order the editor reports them
REQUIRED_DRAFT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("rmo", "RMO is required"),
    ("officer", "Officer is required"),
    ("lot", "Lot is required"),
    ("officer_name", "Officer Name is required"),
    ("email", "Email is required"),
    ("mobile_number", "Mobile Number is required"),
)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.search(email or ""))


def is_valid_mobile(mobile: str) -> bool:
    return bool(MOBILE_PATTERN.match((mobile or "").strip()))


def missing_fields(payload: Mapping[str, Any], required: Sequence[str]) -> List[str]:
    """Names of ``required`` keys that are absent or blank in ``payload``."""
    return [field for field in required if is_blank(payload.get(field))]


def check_nameplate_payload(payload: Dict[str, Any]) -> Tuple[List[str], List[str]]:
    """
    Validate a createNameplate body.

    Returns ``(missing, errors)``: the missing field names, and every violation
    message (one ``"<field> is required"`` per missing field, then type and format errors).
    """
    missing = missing_fields(payload, REQUIRED_NAMEPLATE_FIELDS)
    errors = [f"{field} is required" for field in missing]

    for field in REQUIRED_NAMEPLATE_FIELDS + OPTIONAL_TEXT_FIELDS:
        value = payload.get(field)
        if value is not None and not isinstance(value, str):
            errors.append(f"{field} must be a string")

    email = payload.get("email")
    if not is_blank(email) and not is_valid_email(str(email)):
        errors.append(INVALID_EMAIL)

    mobile = payload.get("mobileNumber") or payload.get("mobile_number")
    if not is_blank(mobile) and not is_valid_mobile(str(mobile)):
        errors.append(INVALID_MOBILE)

    return missing, errors


def check_draft(draft: Any) -> List[str]:
    """Editor-side checks run before rasterizing a draft."""
    errors = []
    for attr, message in REQUIRED_DRAFT_FIELDS:
        if is_blank(getattr(draft, attr, None)):
            errors.append(message)

    email = getattr(draft, "email", "") or ""
    if email.strip() and not is_valid_email(email):
        errors.append(INVALID_EMAIL)

    mobile = getattr(draft, "mobile_number", "") or ""
    if mobile.strip() and not is_valid_mobile(mobile):
        errors.append(INVALID_MOBILE)

    return errors
