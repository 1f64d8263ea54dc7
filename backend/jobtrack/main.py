import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobtrack.core.config import settings
from jobtrack.core.database import init_db
from jobtrack.core.errors import error_payload, field_errors
from jobtrack.core.logging import configure_logging
from jobtrack.routes.applications import router as applications_router
from jobtrack.web.views import router as web_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
    yield


app = FastAPI(title="Job Application Tracker", lifespan=lifespan)
logger.info(
    "Startup config: ENV=%s sqlite=%s AUTO_CREATE_TABLES=%s",
    settings.ENV,
    settings.is_sqlite,
    settings.AUTO_CREATE_TABLES,
)


@app.exception_handler(StarletteHTTPException)
def http_exception_handler(request: Request, exc: StarletteHTTPException):  # noqa: ARG001
    detail = exc.detail
    message: str
    errors: dict | None = None

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        # HTTPException(detail={"message": "...", "errors": {...}})
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        errs = detail.get("errors")
        errors = errs if isinstance(errs, dict) else None
    else:
        message = str(detail) if detail is not None else "Request failed"

    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.status_code, message, errors),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=400,
        content=error_payload(400, "Validation failed", field_errors(exc.errors()) or {"body": ["Invalid request payload"]}),
    )


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_payload(500, "Internal server error"))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(applications_router)
app.include_router(web_router)

@app.get("/health")
def health_check():
    return {"status": "ok"}
