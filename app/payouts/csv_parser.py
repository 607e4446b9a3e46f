from __future__ import annotations

import re
from typing import Optional

from app.payouts.model import PayoutRow

CSV_HEADER = ["employee_id", "amount", "currency", "date", "note"]

_LINE_RE = re.compile(r"\r?\n")


def parse_csv(text: str) -> list[list[str]]:
    """
    Split raw payout CSV text into rows of trimmed cells.

    No quoting support: a comma inside a field is a separator.
    """
    body = (text or "").strip()
    if not body:
        return []
    return [[cell.strip() for cell in line.split(",")] for line in _LINE_RE.split(body)]


def _cell(row: list[str], i: int) -> Optional[str]:
    if i >= len(row):
        return None
    return row[i] or None


def to_payout_rows(rows: list[list[str]], *, skip_header: bool = True) -> list[PayoutRow]:
    data = rows[1:] if skip_header else rows
    return [
        PayoutRow(
            index=i,
            employee_id=_cell(r, 0),
            amount=_cell(r, 1),
            currency=_cell(r, 2),
            date=_cell(r, 3),
            note=_cell(r, 4),
        )
        for i, r in enumerate(data)
    ]


def template_rows(today: str, currency: str) -> list[list[str]]:
    return [CSV_HEADER, ["EMP001", "100000", currency, today, "September salary"]]
