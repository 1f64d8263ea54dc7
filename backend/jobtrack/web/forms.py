from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from jobtrack.core.errors import field_errors
from jobtrack.models.job_application import JobApplication
from jobtrack.models.status import ApplicationStatus

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Input names match the JSON field names so schema errors map straight onto inputs.
FORM_FIELDS = ("company", "jobTitle", "dateApplied", "status", "notes", "link")


def today_iso() -> str:
    return date.today().isoformat()


def blank_form() -> dict[str, str]:
    return {
        "company": "",
        "jobTitle": "",
        "dateApplied": today_iso(),
        "status": ApplicationStatus.APPLIED.value,
        "notes": "",
        "link": "",
    }


def to_input_date(dt: Optional[datetime]) -> str:
    """Reformat a stored timestamp for an <input type="date">."""
    if dt is None:
        return ""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%d")


def form_from_application(app: JobApplication) -> dict[str, str]:
    return {
        "company": app.company or "",
        "jobTitle": app.job_title or "",
        "dateApplied": to_input_date(app.date_applied),
        "status": app.status or ApplicationStatus.APPLIED.value,
        "notes": app.notes or "",
        "link": app.link or "",
    }


def validate_form(form: dict[str, str], schema: Type[SchemaT]) -> tuple[Optional[SchemaT], dict[str, list[str]]]:
    """
    Run the submitted form through the API schema before touching the store.
    Returns (payload, {}) on success or (None, field errors) on failure.
    """
    data = {k: form.get(k, "") for k in FORM_FIELDS}
    try:
        return schema.model_validate(data), {}
    except ValidationError as exc:
        return None, field_errors(exc.errors())
