from __future__ import annotations

import secrets
import time
from typing import Optional


def new_external_id(prefix: str, employee_id: str, row_index: Optional[int] = None) -> str:
    # {prefix}-{unix_ms}-{employee}[-{row}]-{nonce}
    parts = [prefix, str(int(time.time() * 1000)), employee_id]
    if row_index is not None:
        parts.append(str(row_index))
    parts.append(secrets.token_hex(4))
    return "-".join(parts)
