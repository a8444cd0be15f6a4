import re
from typing import List, Mapping

from email_validator import validate_email, EmailNotValidError

from ..models.work import CATEGORIES
from ..schemas.work import FieldError

# IIITN student addresses: bt2xxxxxxx@iiitn.ac.in
INSTITUTIONAL_EMAIL_RE = re.compile(r"^bt2\d{7}@iiitn\.ac\.in$", re.IGNORECASE)

REQUIRED_TEXT_FIELDS = {
    "name": "Student name is required",
    "roll": "Roll number is required",
    "title": "Title is required",
    "description": "Description is required",
}


def _text(fields: Mapping, key: str) -> str:
    value = fields.get(key)
    if value is None:
        return ""
    return str(value).strip()


def is_institutional_email(email: str) -> bool:
    if not email:
        return False
    return bool(INSTITUTIONAL_EMAIL_RE.match(email.strip()))


def is_valid_email(email: str) -> bool:
    """Generic address shape check, no DNS lookups."""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_submission(
    fields: Mapping, require_institutional: bool = True
) -> List[FieldError]:
    """Check submission metadata and return field errors (empty when valid)."""
    errors: List[FieldError] = []

    for key in ("name", "roll"):
        if not _text(fields, key):
            errors.append(FieldError(field=key, msg=REQUIRED_TEXT_FIELDS[key]))

    email = _text(fields, "email")
    if not email or not is_valid_email(email):
        errors.append(FieldError(field="email", msg="Valid email is required"))
    elif require_institutional and not is_institutional_email(email):
        errors.append(
            FieldError(
                field="email",
                msg="Only IIITN students (bt2xxxxxxx@iiitn.ac.in) can upload",
            )
        )

    for key in ("title", "description"):
        if not _text(fields, key):
            errors.append(FieldError(field=key, msg=REQUIRED_TEXT_FIELDS[key]))

    if _text(fields, "category") not in CATEGORIES:
        errors.append(
            FieldError(field="category", msg="Valid category is required")
        )

    return errors
