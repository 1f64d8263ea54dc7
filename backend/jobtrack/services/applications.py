from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import delete, desc, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import ObjectDeletedError

from jobtrack.models.job_application import JobApplication
from jobtrack.models.status import ALL_STATUSES
from jobtrack.schemas.job_application import JobApplicationCreate, JobApplicationUpdate

logger = logging.getLogger(__name__)


class ApplicationNotFoundError(LookupError):
    """Raised when no job application row exists for the given id."""

    def __init__(self, application_id: str) -> None:
        super().__init__(f"Job application {application_id} not found")
        self.application_id = application_id


def list_applications(db: Session) -> list[JobApplication]:
    return (
        db.query(JobApplication)
        .order_by(desc(JobApplication.date_applied), desc(JobApplication.created_at))
        .all()
    )


def get_application(db: Session, application_id: str) -> JobApplication:
    try:
        app = db.get(JobApplication, application_id)
    except ObjectDeletedError:
        # Row removed under an instance this session still tracks.
        app = None
    if app is None:
        raise ApplicationNotFoundError(application_id)
    return app


def create_application(db: Session, payload: JobApplicationCreate) -> JobApplication:
    data = payload.model_dump()
    data["status"] = payload.status.value

    app = JobApplication(**data)
    db.add(app)
    db.commit()
    db.refresh(app)

    logger.info("Created job application %s", app.id)
    return app


def update_application(db: Session, application_id: str, payload: JobApplicationUpdate) -> JobApplication:
    """
    Unconditional partial patch. Fields absent from the payload keep their stored value;
    updated_at is refreshed by the column's onupdate hook.
    """
    data = payload.changes()
    if not data:
        return get_application(db, application_id)

    result = db.execute(
        update(JobApplication)
        .where(JobApplication.id == application_id)
        .values(**data)
    )
    if result.rowcount == 0:
        db.rollback()
        raise ApplicationNotFoundError(application_id)
    db.commit()

    logger.info("Updated job application %s fields=%s", application_id, sorted(data))
    return get_application(db, application_id)


def delete_application(db: Session, application_id: str) -> None:
    result = db.execute(
        delete(JobApplication)
        .where(JobApplication.id == application_id)
    )
    if result.rowcount == 0:
        db.rollback()
        raise ApplicationNotFoundError(application_id)
    db.commit()

    logger.info("Deleted job application %s", application_id)


def _matches_search(app, term: str) -> bool:
    for value in (app.job_title, app.company, app.notes):
        if value and term in value.lower():
            return True
    return False


def filter_applications(
    apps: Iterable[JobApplication],
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> list[JobApplication]:
    """
    In-memory search and status filter for the list page, applied together.

    search: case-insensitive substring of job title, company or notes; blank matches all.
    status: exact status literal; None, "" or "All" disables the filter.
    """
    term = (search or "").strip().lower()
    wanted = (status or "").strip()
    if wanted == ALL_STATUSES:
        wanted = ""

    out: list[JobApplication] = []
    for app in apps:
        if term and not _matches_search(app, term):
            continue
        if wanted and app.status != wanted:
            continue
        out.append(app)
    return out
