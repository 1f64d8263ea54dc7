"""
Dev-only reset script for the job tracker.

What it does:
- Deletes every row in job_applications (works on SQLite and Postgres).
- Optionally creates the table first when it does not exist (--create).

Guardrails:
- Requires ENV=dev
- Requires confirmation prompt unless --yes is passed
- Logs actions to logs/ with a timestamped file
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path
import sys
from typing import Iterable


# Allow `import jobtrack.*` from backend/ without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = REPO_ROOT / "backend"
sys.path.insert(0, str(BACKEND_DIR))


from sqlalchemy import delete, func, select  # noqa: E402

from jobtrack.core.config import settings  # noqa: E402
from jobtrack.core.database import SessionLocal, init_db  # noqa: E402
from jobtrack.models.job_application import JobApplication  # noqa: E402


def utc_now_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def log_write(fp: Path, lines: Iterable[str]) -> None:
    fp.parent.mkdir(parents=True, exist_ok=True)
    with fp.open("a", encoding="utf-8") as f:
        for line in lines:
            f.write(line.rstrip("\n") + "\n")


def redacted_db_target() -> str:
    if settings.is_sqlite:
        return settings.database_url
    return f"{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME} (creds redacted)"


def main() -> int:
    parser = argparse.ArgumentParser(description="Dev reset: delete all job applications.")
    parser.add_argument("--yes", action="store_true", help="Skip confirmation prompt.")
    parser.add_argument("--create", action="store_true", help="Create missing tables before deleting.")
    args = parser.parse_args()

    if (settings.ENV or "").strip().lower() != "dev":
        print(f"Refusing to run: ENV must be 'dev' (got {settings.ENV!r})")
        return 2

    log_path = REPO_ROOT / "logs" / f"reset_dev_db_{utc_now_stamp()}.log"
    log_write(log_path, [f"[start] {datetime.now(timezone.utc).isoformat()} env={settings.ENV}"])
    log_write(log_path, [f"[db] target={redacted_db_target()}"])

    if args.create:
        init_db()
        log_write(log_path, ["[db] ensured tables exist"])

    if not args.yes:
        msg = (
            "WARNING: This will DELETE every row in job_applications.\n\n"
            "Type RESET to continue: "
        )
        resp = input(msg).strip()
        if resp != "RESET":
            print("Cancelled.")
            log_write(log_path, ["[cancelled] user did not confirm"])
            return 1

    with SessionLocal() as db:
        before = db.execute(select(func.count()).select_from(JobApplication)).scalar_one()
        log_write(log_path, [f"[db] rows_before={before}"])
        db.execute(delete(JobApplication))
        db.commit()

    log_write(
        log_path,
        [
            f"[done] deleted={before}",
            f"[done] {datetime.now(timezone.utc).isoformat()}",
        ],
    )
    print(f"Done. Deleted {before} application(s). Log written to: {log_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
