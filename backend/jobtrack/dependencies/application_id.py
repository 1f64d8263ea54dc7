from __future__ import annotations

import uuid

from fastapi import HTTPException, Path

INVALID_ID_MESSAGE = "Invalid ID format. Must be a UUID."


def parse_uuid(value: str) -> str | None:
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, AttributeError, TypeError):
        return None


def get_application_id(id: str = Path(...)) -> str:  # noqa: A002
    """
    Rejects malformed ids with a 400 before any store access.
    Returns the canonical (lowercase, hyphenated) form.
    """
    parsed = parse_uuid(id)
    if parsed is None:
        raise HTTPException(status_code=400, detail=INVALID_ID_MESSAGE)
    return parsed
