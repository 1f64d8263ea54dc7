from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from typing import Generator
from sqlalchemy.orm import Session
from jobtrack.core.base import Base
from jobtrack.core.config import settings

# SQLite connections are bound to the creating thread unless told otherwise;
# FastAPI runs sync handlers in a threadpool.
_connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(
    settings.database_url,
    connect_args=_connect_args,
    pool_pre_ping=True,   # checks stale connections
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db() -> None:
    # Register models with the metadata before creating tables.
    from jobtrack.models.job_application import JobApplication  # noqa: F401

    Base.metadata.create_all(bind=engine)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
