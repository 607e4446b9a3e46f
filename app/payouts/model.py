from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PayoutMedium(str, Enum):
    MOBILE_MONEY = "mobile money"
    ORANGE_MONEY = "orange money"

    @classmethod
    def parse(cls, value: str | None, default: "PayoutMedium | None" = None) -> "PayoutMedium":
        v = (value or "").strip().lower().replace("_", " ").replace("-", " ")
        for m in cls:
            if m.value == v:
                return m
        if default is not None:
            return default
        raise ValueError(f"Unsupported payout medium: {value!r}")


@dataclass(frozen=True)
class EmployeeDirectoryEntry:
    phone: str
    email: str
    display_name: str


@dataclass(frozen=True)
class PayoutRequest:
    amount: float
    phone: str
    medium: PayoutMedium
    name: str
    email: str
    user_id: str
    external_id: str
    message: str

    def to_wire(self) -> dict[str, Any]:
        # NaN and inf are not valid JSON; the gateway sees null and rejects the row
        amount = self.amount if math.isfinite(self.amount) else None
        return {
            "amount": amount,
            "phone": self.phone,
            "medium": self.medium.value,
            "name": self.name,
            "email": self.email,
            "userId": self.user_id,
            "externalId": self.external_id,
            "message": self.message,
        }


@dataclass(frozen=True)
class PayoutRow:
    """One data row of a payout CSV, positional cells mapped to names.

    Optional cells are None when absent or blank.
    """

    index: int
    employee_id: Optional[str]
    amount: Optional[str]
    currency: Optional[str]
    date: Optional[str]
    note: Optional[str]


@dataclass(frozen=True)
class Rejection:
    reason: str
    employee_id: Optional[str] = None


@dataclass(frozen=True)
class RowOutcome:
    index: int
    employee_id: Optional[str]
    ok: bool
    reason: Optional[str] = None
    external_id: Optional[str] = None
    response: Optional[dict[str, Any]] = None


@dataclass
class BatchSummary:
    batch_id: str
    state: str
    total: int
    done: int
    succeeded: int
    failed: int
    outcomes: list[RowOutcome] = field(default_factory=list)
