# storage.py
from __future__ import annotations

import re
import uuid
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Optional

from app.payouts.model import EmployeeDirectoryEntry
from security import hash_password
from settings import settings

_EMP_ID_RE = re.compile(r"^EMP(\d+)$")


class DuplicateEmail(ValueError):
    pass


@dataclass(frozen=True)
class Admin:
    id: str
    name: str
    email: str
    password_hash: str
    phone: Optional[str] = None

    def public(self) -> dict[str, Any]:
        out = asdict(self)
        out.pop("password_hash")
        return out


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    email: str
    phone: str
    position: str
    department: str
    salary: int
    status: str = "Active"
    photo: Optional[str] = None
    created_at: datetime = datetime.min.replace(tzinfo=timezone.utc)

    def directory_entry(self) -> EmployeeDirectoryEntry:
        return EmployeeDirectoryEntry(phone=self.phone, email=self.email, display_name=self.name)


class MemStorage:
    """
    In-memory admins + employees.

    Also the employee directory for payouts: lookup() and
    directory_snapshot() are read-only views over the employee map.
    """

    def __init__(self, *, seed_admin: bool = True):
        self._lock = RLock()
        self._admins: dict[str, Admin] = {}
        self._employees: dict[str, Employee] = {}

        if seed_admin:
            self.create_admin(
                name=settings.DEFAULT_ADMIN_NAME,
                email=settings.DEFAULT_ADMIN_EMAIL,
                password=settings.DEFAULT_ADMIN_PASSWORD,
                phone=settings.DEFAULT_ADMIN_PHONE,
            )

    # -----------------------
    # Admins
    # -----------------------
    def get_admin(self, admin_id: str) -> Optional[Admin]:
        with self._lock:
            return self._admins.get(admin_id)

    def get_admin_by_email(self, email: str) -> Optional[Admin]:
        key = (email or "").strip().lower()
        with self._lock:
            return next((a for a in self._admins.values() if a.email.lower() == key), None)

    def create_admin(self, *, name: str, email: str, password: str, phone: Optional[str] = None) -> Admin:
        with self._lock:
            if self.get_admin_by_email(email):
                raise DuplicateEmail(email)
            admin = Admin(
                id=str(uuid.uuid4()),
                name=name,
                email=email,
                password_hash=hash_password(password),
                phone=phone or None,
            )
            self._admins[admin.id] = admin
            return admin

    def update_admin(self, admin_id: str, **changes: Any) -> Optional[Admin]:
        with self._lock:
            admin = self._admins.get(admin_id)
            if admin is None:
                return None
            new_email = changes.get("email")
            if new_email and new_email.lower() != admin.email.lower():
                other = self.get_admin_by_email(new_email)
                if other is not None and other.id != admin_id:
                    raise DuplicateEmail(new_email)
            if "password" in changes:
                changes["password_hash"] = hash_password(changes.pop("password"))
            updated = replace(admin, **changes)
            self._admins[admin_id] = updated
            return updated

    # -----------------------
    # Employees
    # -----------------------
    def list_employees(self) -> list[Employee]:
        with self._lock:
            items = list(self._employees.values())
        # newest first
        return sorted(items, key=lambda e: (e.created_at, e.id), reverse=True)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        with self._lock:
            return self._employees.get(employee_id)

    def get_employee_by_email(self, email: str) -> Optional[Employee]:
        key = (email or "").strip().lower()
        with self._lock:
            return next((e for e in self._employees.values() if e.email.lower() == key), None)

    def create_employee(self, **fields: Any) -> Employee:
        with self._lock:
            if self.get_employee_by_email(fields.get("email", "")):
                raise DuplicateEmail(fields.get("email"))
            employee = Employee(
                id=self._next_employee_id(),
                created_at=datetime.now(timezone.utc),
                **fields,
            )
            self._employees[employee.id] = employee
            return employee

    def update_employee(self, employee_id: str, **changes: Any) -> Optional[Employee]:
        with self._lock:
            employee = self._employees.get(employee_id)
            if employee is None:
                return None
            new_email = changes.get("email")
            if new_email and new_email.lower() != employee.email.lower():
                if self.get_employee_by_email(new_email):
                    raise DuplicateEmail(new_email)
            updated = replace(employee, **changes)
            self._employees[employee_id] = updated
            return updated

    def delete_employee(self, employee_id: str) -> bool:
        with self._lock:
            return self._employees.pop(employee_id, None) is not None

    def _next_employee_id(self) -> str:
        nums = [int(m.group(1)) for m in (_EMP_ID_RE.match(k) for k in self._employees) if m]
        return f"EMP{(max(nums) if nums else 0) + 1:03d}"

    # -----------------------
    # Employee directory (read-only)
    # -----------------------
    def lookup(self, employee_id: str) -> Optional[EmployeeDirectoryEntry]:
        employee = self.get_employee(employee_id)
        return employee.directory_entry() if employee else None

    def directory_snapshot(self) -> dict[str, EmployeeDirectoryEntry]:
        with self._lock:
            return {k: e.directory_entry() for k, e in self._employees.items()}


_storage: MemStorage | None = None


def get_storage() -> MemStorage:
    global _storage
    if _storage is None:
        _storage = MemStorage()
    return _storage


def reset_storage() -> MemStorage:
    global _storage
    _storage = MemStorage()
    return _storage
