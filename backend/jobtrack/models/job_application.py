import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from jobtrack.core.base import Base
from jobtrack.models.status import ApplicationStatus


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # Python-side timestamps keep sub-second precision on SQLite, where CURRENT_TIMESTAMP does not.
    return datetime.now(timezone.utc)


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(String(36), primary_key=True, default=_new_id)

    company = Column(Text, nullable=False)
    job_title = Column(Text, nullable=False)

    date_applied = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # One of ApplicationStatus; stored as its literal value.
    status = Column(String(32), nullable=False, default=ApplicationStatus.APPLIED.value)

    notes = Column(Text, nullable=True)
    link = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<JobApplication {self.id} {self.company!r} {self.job_title!r} {self.status}>"
