from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobtrack.core.database import get_db
from jobtrack.dependencies.application_id import get_application_id
from jobtrack.schemas.job_application import (
    JobApplicationCreate,
    JobApplicationOut,
    JobApplicationUpdate,
)
from jobtrack.services.applications import (
    ApplicationNotFoundError,
    create_application,
    delete_application,
    get_application,
    list_applications,
    update_application,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["applications"])


def _store_failure(db: Session, message: str) -> HTTPException:
    logger.exception(message)
    db.rollback()
    return HTTPException(status_code=500, detail=message)


@router.get("", response_model=list[JobApplicationOut])
def list_job_applications(db: Session = Depends(get_db)):
    try:
        return list_applications(db)
    except SQLAlchemyError:
        raise _store_failure(db, "Error fetching job applications")


@router.post("", response_model=JobApplicationOut, status_code=status.HTTP_201_CREATED)
def create_job_application(payload: JobApplicationCreate, db: Session = Depends(get_db)):
    try:
        return create_application(db, payload)
    except SQLAlchemyError:
        raise _store_failure(db, "Error creating job application")


@router.get("/{id}", response_model=JobApplicationOut)
def get_job_application(application_id: str = Depends(get_application_id), db: Session = Depends(get_db)):
    try:
        return get_application(db, application_id)
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found")
    except SQLAlchemyError:
        raise _store_failure(db, "Failed to fetch application")


@router.put("/{id}", response_model=JobApplicationOut)
def update_job_application(
    payload: JobApplicationUpdate,
    application_id: str = Depends(get_application_id),
    db: Session = Depends(get_db),
):
    try:
        return update_application(db, application_id, payload)
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found for update")
    except SQLAlchemyError:
        raise _store_failure(db, "Failed to update application")


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_job_application(application_id: str = Depends(get_application_id), db: Session = Depends(get_db)):
    try:
        delete_application(db, application_id)
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found for delete")
    except SQLAlchemyError:
        raise _store_failure(db, "Failed to delete application")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
