from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

from app.payouts.csv_parser import parse_csv, to_payout_rows
from app.payouts.dispatcher import PayoutBatch
from app.payouts.model import EmployeeDirectoryEntry, PayoutMedium
from app.payouts.progress import ProgressSnapshot
from app.providers.factory import get_payout_sender
from services.observability import configure_logging
from settings import settings


def die(message, code=1):
    print(message)
    sys.exit(code)


def load_directory(path: Path) -> dict[str, EmployeeDirectoryEntry]:
    """Employees JSON: a list of {id, name, email, phone} objects."""
    items = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(items, dict):
        items = items.get("employees") or []
    return {
        str(e["id"]): EmployeeDirectoryEntry(
            phone=str(e.get("phone") or ""),
            email=str(e.get("email") or ""),
            display_name=str(e.get("name") or ""),
        )
        for e in items
    }


def _print_progress(s: ProgressSnapshot) -> None:
    print(f"{s.done}/{s.total} processed, {s.succeeded} succeeded, {s.failed} failed")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one CSV payout batch against the configured gateway.")
    parser.add_argument("csv_path", type=Path)
    parser.add_argument("--employees", type=Path, required=True, help="employee directory JSON")
    parser.add_argument("--date", default=date.today().isoformat(), help="default payout date")
    parser.add_argument("--medium", default=settings.PAYOUT_DEFAULT_MEDIUM)
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)

    if not args.csv_path.exists():
        die(f"CSV not found: {args.csv_path}")
    if not args.employees.exists():
        die(f"Employees file not found: {args.employees}")

    try:
        medium = PayoutMedium.parse(args.medium)
    except ValueError as exc:
        die(str(exc))

    rows = to_payout_rows(parse_csv(args.csv_path.read_text(encoding="utf-8-sig")))
    if not rows:
        die("No data rows found in the CSV.")

    batch = PayoutBatch(
        rows,
        load_directory(args.employees),
        get_payout_sender(),
        default_date=args.date,
        medium=medium,
        observer=_print_progress,
    )
    summary = batch.run()

    print("batch_id:", summary.batch_id)
    print("counts:", f"succeeded={summary.succeeded}", f"failed={summary.failed}", f"total={summary.total}")
    for o in summary.outcomes:
        if not o.ok:
            print(f"  row={o.index} employee_id={o.employee_id} reason={o.reason}")

    if summary.failed:
        sys.exit(2)


if __name__ == "__main__":
    main()
