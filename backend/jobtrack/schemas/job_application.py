from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, HttpUrl, ValidationError, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from jobtrack.models.status import ApplicationStatus

# Links are rendered as hrefs, so only http(s) is allowed.
_URL_ADAPTER = TypeAdapter(HttpUrl)

INVALID_DATE_MESSAGE = "Invalid date format. Expected YYYY-MM-DD"
INVALID_STATUS_MESSAGE = "Please select a valid status"
INVALID_URL_MESSAGE = "Must be a valid URL"


def parse_date_applied(value: Any) -> datetime:
    """
    Accepts a calendar date (YYYY-MM-DD) or an ISO-8601 date-time.
    Bare dates are midnight UTC; naive date-times are taken as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        try:
            if len(raw) == 10:
                d = date.fromisoformat(raw)
                dt = datetime(d.year, d.month, d.day)
            else:
                dt = datetime.fromisoformat(raw)
        except ValueError:
            raise PydanticCustomError("date_format", INVALID_DATE_MESSAGE)
    else:
        raise PydanticCustomError("date_format", INVALID_DATE_MESSAGE)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    # Stored as UTC; SQLite drops offsets, so normalize before it gets there.
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        raise PydanticCustomError("date_format", INVALID_DATE_MESSAGE)


def _required_text(value: Any, message: str) -> Any:
    if value is None:
        raise PydanticCustomError("required_text", message)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise PydanticCustomError("required_text", message)
    return value


def _status(value: Any) -> Any:
    if isinstance(value, ApplicationStatus):
        return value
    if value not in ApplicationStatus.values():
        raise PydanticCustomError("status", INVALID_STATUS_MESSAGE)
    return value


def _optional_text(value: Any) -> Any:
    # Empty strings from forms mean "no value".
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _optional_url(value: Any) -> Any:
    value = _optional_text(value)
    if value is None:
        return None
    if not isinstance(value, str):
        raise PydanticCustomError("url", INVALID_URL_MESSAGE)
    value = value.strip()
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url", INVALID_URL_MESSAGE)
    return value


class _ApplicationIn(BaseModel):
    # JSON bodies use camelCase (jobTitle, dateApplied); Python code uses snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("company", mode="before", check_fields=False)
    @classmethod
    def _check_company(cls, v: Any) -> Any:
        return _required_text(v, "Company name is required")

    @field_validator("job_title", mode="before", check_fields=False)
    @classmethod
    def _check_job_title(cls, v: Any) -> Any:
        return _required_text(v, "Job title is required")

    @field_validator("date_applied", mode="before", check_fields=False)
    @classmethod
    def _check_date_applied(cls, v: Any) -> datetime:
        return parse_date_applied(v)

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def _check_status(cls, v: Any) -> Any:
        return _status(v)

    @field_validator("notes", mode="before", check_fields=False)
    @classmethod
    def _check_notes(cls, v: Any) -> Any:
        return _optional_text(v)

    @field_validator("link", mode="before", check_fields=False)
    @classmethod
    def _check_link(cls, v: Any) -> Any:
        return _optional_url(v)


class JobApplicationCreate(_ApplicationIn):
    company: str
    job_title: str
    date_applied: datetime
    status: ApplicationStatus
    notes: Optional[str] = None
    link: Optional[str] = None


class JobApplicationUpdate(_ApplicationIn):
    """
    Partial patch: only fields present in the request are written.
    Non-nullable columns reject an explicit null; notes/link accept null or "" to clear.
    """

    company: Optional[str] = None
    job_title: Optional[str] = None
    date_applied: Optional[datetime] = None
    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = None
    link: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        if "status" in data and data["status"] is not None:
            data["status"] = ApplicationStatus(data["status"]).value
        return data


def to_utc_iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class JobApplicationOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    company: str
    job_title: str
    date_applied: datetime
    status: ApplicationStatus
    notes: Optional[str] = None
    link: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("date_applied", "created_at", "updated_at")
    def serialize_dt(self, dt: Optional[datetime]):
        return to_utc_iso(dt)
