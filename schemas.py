# schemas.py
from __future__ import annotations

from pydantic import BaseModel, Field, EmailStr
from datetime import datetime
from typing import Optional, List, Literal

EmployeeStatus = Literal["Active", "Inactive"]
MediumName = Literal["mobile money", "orange money"]


# -------- AUTH --------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AdminOut(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminOut


class AdminResponse(BaseModel):
    admin: AdminOut


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")

    model_config = {"populate_by_name": True}


class MessageResponse(BaseModel):
    message: str


# -------- EMPLOYEES --------
class EmployeeCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    position: str = Field(min_length=1)
    department: str = Field(min_length=1)
    salary: int = Field(ge=1)
    status: EmployeeStatus = "Active"


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=1)
    position: Optional[str] = Field(default=None, min_length=1)
    department: Optional[str] = Field(default=None, min_length=1)
    salary: Optional[int] = Field(default=None, ge=1)
    status: Optional[EmployeeStatus] = None


class EmployeeOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    position: str
    department: str
    salary: int
    status: str
    photo: Optional[str] = None
    created_at: datetime


class EmployeeResponse(BaseModel):
    employee: EmployeeOut


class EmployeeListResponse(BaseModel):
    employees: List[EmployeeOut]


# -------- PAYOUTS --------
class ManualPayoutRequest(BaseModel):
    employee_id: str = Field(min_length=1)
    amount: float = Field(gt=0, allow_inf_nan=False)
    medium: MediumName = "mobile money"
    date: Optional[str] = None
    note: Optional[str] = Field(default=None, max_length=500)


class RowOutcomeOut(BaseModel):
    index: int
    employee_id: Optional[str] = None
    ok: bool
    reason: Optional[str] = None
    external_id: Optional[str] = None


class ManualPayoutResponse(BaseModel):
    ok: bool
    employee_id: str
    external_id: Optional[str] = None
    response: Optional[dict] = None


class BatchProgressOut(BaseModel):
    batch_id: str
    state: str
    total: int
    done: int
    succeeded: int
    failed: int
    outcomes: List[RowOutcomeOut] = []
