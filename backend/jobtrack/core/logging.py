import logging

from jobtrack.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Root logger setup for the API process. Safe to call more than once;
    basicConfig is a no-op when handlers already exist (e.g. under uvicorn or pytest).
    """
    lvl = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
    logging.getLogger("jobtrack").setLevel(lvl)
