from __future__ import annotations

from typing import Any, Iterable

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "VALIDATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
}


def error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


def _field_name(loc: Iterable[Any]) -> str:
    parts = [p for p in loc if isinstance(p, str)]
    # ("body", "company") -> "company"; ("body",) means the body itself was unusable.
    if len(parts) > 1 and parts[0] in {"body", "query", "path", "header", "cookie"}:
        parts = parts[1:]
    return parts[-1] if parts else "body"


def field_errors(errors: Iterable[dict]) -> dict[str, list[str]]:
    """
    Flatten pydantic error entries into {field: [messages]}, keeping first-seen order.
    """
    out: dict[str, list[str]] = {}
    for err in errors:
        field = _field_name(err.get("loc") or ())
        msg = str(err.get("msg") or "Invalid value")
        bucket = out.setdefault(field, [])
        if msg not in bucket:
            bucket.append(msg)
    return out


def error_payload(status_code: int, message: str, errors: dict[str, list[str]] | None = None) -> dict:
    payload: dict = {"error": error_code(status_code), "message": message}
    if errors:
        payload["errors"] = errors
    return payload
