"""
Server-rendered pages: the application list (search + status filter) and the add/edit forms.

The pages share the API's schemas and service functions; forms are validated with
the same pydantic models before any store call, and every successful submit
redirects back to the list (POST/redirect/GET).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobtrack.core.database import get_db
from jobtrack.dependencies.application_id import INVALID_ID_MESSAGE, parse_uuid
from jobtrack.models.status import ALL_STATUSES, ApplicationStatus
from jobtrack.schemas.job_application import JobApplicationCreate, JobApplicationUpdate
from jobtrack.services.applications import (
    ApplicationNotFoundError,
    create_application,
    delete_application,
    filter_applications,
    get_application,
    list_applications,
    update_application,
)
from jobtrack.web.forms import blank_form, form_from_application, validate_form

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["pages"], include_in_schema=False)

_STATUS_BADGES = {
    ApplicationStatus.APPLIED.value: "badge-applied",
    ApplicationStatus.INTERVIEWING.value: "badge-interviewing",
    ApplicationStatus.OFFER.value: "badge-offer",
    ApplicationStatus.REJECTED.value: "badge-rejected",
}


def display_date(dt: Optional[datetime]) -> str:
    if dt is None:
        return ""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%b %d, %Y")


def status_badge(status: Optional[str]) -> str:
    return _STATUS_BADGES.get(status or "", "badge-other")


templates.env.filters["display_date"] = display_date
templates.env.filters["status_badge"] = status_badge
templates.env.globals["STATUSES"] = ApplicationStatus.values()
templates.env.globals["ALL_STATUSES"] = ALL_STATUSES


def _safe_next(target: Optional[str], default: str = "/") -> str:
    # Only same-site paths; anything else falls back to the list.
    t = (target or "").strip()
    if not t.startswith("/") or t.startswith("//"):
        return default
    return t


def _with_params(path: str, **params: Optional[str]) -> str:
    clean = {k: v for k, v in params.items() if v}
    if not clean:
        return path
    sep = "&" if "?" in path else "?"
    return f"{path}{sep}{urlencode(clean)}"


def _list_filters(q: Optional[str], status: Optional[str]) -> dict[str, Optional[str]]:
    s = (status or "").strip()
    return {"q": (q or "").strip() or None, "status": s if s and s != ALL_STATUSES else None}


# ----------------------------
# List
# ----------------------------


@router.get("/", response_class=HTMLResponse)
def list_page(
    request: Request,
    q: str = "",
    status: str = ALL_STATUSES,
    notice: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
):
    ctx = {
        "q": q,
        "status": status or ALL_STATUSES,
        "notice": notice,
        "api_error": error,
        "applications": [],
        "total": 0,
        "load_error": None,
    }
    try:
        apps = list_applications(db)
    except SQLAlchemyError:
        logger.exception("Error fetching job applications for list page")
        db.rollback()
        ctx["load_error"] = "Failed to fetch applications"
        return templates.TemplateResponse(request, "list.html", ctx, status_code=500)

    ctx["total"] = len(apps)
    ctx["applications"] = filter_applications(apps, search=q, status=status)
    return templates.TemplateResponse(request, "list.html", ctx)


@router.post("/applications/{id}/delete")
def delete_from_list(
    id: str,  # noqa: A002
    q: str = Form(""),
    status: str = Form(ALL_STATUSES),
    db: Session = Depends(get_db),
):
    filters = _list_filters(q, status)
    application_id = parse_uuid(id)
    if application_id is None:
        return RedirectResponse(_with_params("/", error=INVALID_ID_MESSAGE, **filters), status_code=303)

    try:
        delete_application(db, application_id)
    except ApplicationNotFoundError:
        return RedirectResponse(
            _with_params("/", error="Application not found for delete", **filters),
            status_code=303,
        )
    except SQLAlchemyError:
        logger.exception("Error deleting job application %s", application_id)
        db.rollback()
        return RedirectResponse(_with_params("/", error="Failed to delete application", **filters), status_code=303)

    return RedirectResponse(_with_params("/", notice="Application deleted successfully", **filters), status_code=303)


# ----------------------------
# Add
# ----------------------------


def _render_form(
    request: Request,
    *,
    mode: str,
    form: dict[str, str],
    errors: Optional[dict[str, list[str]]] = None,
    api_error: Optional[str] = None,
    load_error: Optional[str] = None,
    application_id: Optional[str] = None,
    next_url: str = "/",
    status_code: int = 200,
):
    ctx = {
        "mode": mode,
        "form": form,
        "errors": errors or {},
        "api_error": api_error,
        "load_error": load_error,
        "application_id": application_id,
        "next_url": next_url,
    }
    return templates.TemplateResponse(request, "form.html", ctx, status_code=status_code)


@router.get("/add", response_class=HTMLResponse)
def add_page(request: Request, next: Optional[str] = None):  # noqa: A002
    return _render_form(request, mode="add", form=blank_form(), next_url=_safe_next(next))


@router.post("/add", response_class=HTMLResponse)
def add_submit(
    request: Request,
    company: str = Form(""),
    jobTitle: str = Form(""),  # noqa: N803
    dateApplied: str = Form(""),  # noqa: N803
    status: str = Form(""),
    notes: str = Form(""),
    link: str = Form(""),
    next: str = Form("/"),  # noqa: A002
    db: Session = Depends(get_db),
):
    form = {
        "company": company,
        "jobTitle": jobTitle,
        "dateApplied": dateApplied,
        "status": status,
        "notes": notes,
        "link": link,
    }
    next_url = _safe_next(next)

    payload, errors = validate_form(form, JobApplicationCreate)
    if payload is None:
        return _render_form(request, mode="add", form=form, errors=errors, next_url=next_url, status_code=400)

    try:
        create_application(db, payload)
    except SQLAlchemyError:
        logger.exception("Error creating job application from form")
        db.rollback()
        return _render_form(
            request,
            mode="add",
            form=form,
            api_error="Error creating job application",
            next_url=next_url,
            status_code=500,
        )

    return RedirectResponse(_with_params(next_url, notice="Application created successfully!"), status_code=303)


# ----------------------------
# Edit
# ----------------------------


@router.get("/edit/{id}", response_class=HTMLResponse)
def edit_page(request: Request, id: str, db: Session = Depends(get_db)):  # noqa: A002
    application_id = parse_uuid(id)
    if application_id is None:
        return _render_form(request, mode="edit", form={}, load_error=INVALID_ID_MESSAGE, status_code=400)

    try:
        app = get_application(db, application_id)
    except ApplicationNotFoundError:
        return _render_form(
            request,
            mode="edit",
            form={},
            load_error="Application not found",
            application_id=application_id,
            status_code=404,
        )
    except SQLAlchemyError:
        logger.exception("Error fetching job application %s for edit", application_id)
        db.rollback()
        return _render_form(
            request,
            mode="edit",
            form={},
            load_error="Failed to fetch application",
            application_id=application_id,
            status_code=500,
        )

    return _render_form(request, mode="edit", form=form_from_application(app), application_id=application_id)


@router.post("/edit/{id}", response_class=HTMLResponse)
def edit_submit(
    request: Request,
    id: str,  # noqa: A002
    company: str = Form(""),
    jobTitle: str = Form(""),  # noqa: N803
    dateApplied: str = Form(""),  # noqa: N803
    status: str = Form(""),
    notes: str = Form(""),
    link: str = Form(""),
    db: Session = Depends(get_db),
):
    application_id = parse_uuid(id)
    if application_id is None:
        return _render_form(request, mode="edit", form={}, load_error=INVALID_ID_MESSAGE, status_code=400)

    form = {
        "company": company,
        "jobTitle": jobTitle,
        "dateApplied": dateApplied,
        "status": status,
        "notes": notes,
        "link": link,
    }

    payload, errors = validate_form(form, JobApplicationUpdate)
    if payload is None:
        return _render_form(
            request,
            mode="edit",
            form=form,
            errors=errors,
            application_id=application_id,
            status_code=400,
        )

    try:
        update_application(db, application_id, payload)
    except ApplicationNotFoundError:
        return _render_form(
            request,
            mode="edit",
            form=form,
            api_error="Application not found for update",
            application_id=application_id,
            status_code=404,
        )
    except SQLAlchemyError:
        logger.exception("Error updating job application %s from form", application_id)
        db.rollback()
        return _render_form(
            request,
            mode="edit",
            form=form,
            api_error="Failed to update application",
            application_id=application_id,
            status_code=500,
        )

    return RedirectResponse(_with_params("/", notice="Application updated successfully!"), status_code=303)
