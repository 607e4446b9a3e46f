# routes/employees.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import ValidationError

from deps.auth import get_current_admin
from schemas import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeOut,
    EmployeeResponse,
    EmployeeUpdate,
    MessageResponse,
)
from services.uploads import delete_photo, save_photo
from storage import Admin, DuplicateEmail, Employee, get_storage

logger = logging.getLogger("hrdesk.employees")
router = APIRouter(prefix="/api/v1/admin/employees", tags=["employees"])


def _out(e: Employee) -> EmployeeOut:
    return EmployeeOut(
        id=e.id,
        name=e.name,
        email=e.email,
        phone=e.phone,
        position=e.position,
        department=e.department,
        salary=e.salary,
        status=e.status,
        photo=e.photo,
        created_at=e.created_at,
    )


def _validate(model, data: dict):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        )


def _non_empty(**fields: Optional[str]) -> dict:
    # Blank form fields mean "leave unchanged"
    return {k: v for k, v in fields.items() if v is not None and v != ""}


def _has_photo(photo: Optional[UploadFile]) -> bool:
    return photo is not None and bool(photo.filename)


@router.get("", response_model=EmployeeListResponse)
def list_employees(admin: Admin = Depends(get_current_admin)):
    return EmployeeListResponse(employees=[_out(e) for e in get_storage().list_employees()])


@router.post("", response_model=EmployeeResponse, status_code=201)
def create_employee(
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    position: str = Form(""),
    department: str = Form(""),
    salary: str = Form(""),
    status: str = Form("Active"),
    photo: Optional[UploadFile] = File(None),
    admin: Admin = Depends(get_current_admin),
):
    body = _validate(
        EmployeeCreate,
        {
            "name": name,
            "email": email,
            "phone": phone,
            "position": position,
            "department": department,
            "salary": salary,
            "status": status or "Active",
        },
    )

    store = get_storage()
    if store.get_employee_by_email(str(body.email)):
        raise HTTPException(status_code=400, detail="EMAIL_TAKEN")

    photo_url = save_photo(photo) if _has_photo(photo) else None

    try:
        employee = store.create_employee(**body.model_dump(mode="json"), photo=photo_url)
    except DuplicateEmail:
        delete_photo(photo_url)
        raise HTTPException(status_code=400, detail="EMAIL_TAKEN")

    logger.info("employee created id=%s by admin=%s", employee.id, admin.id)
    return EmployeeResponse(employee=_out(employee))


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee_id: str, admin: Admin = Depends(get_current_admin)):
    employee = get_storage().get_employee(employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="EMPLOYEE_NOT_FOUND")
    return EmployeeResponse(employee=_out(employee))


@router.put("/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    salary: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    admin: Admin = Depends(get_current_admin),
):
    store = get_storage()
    existing = store.get_employee(employee_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="EMPLOYEE_NOT_FOUND")

    body = _validate(
        EmployeeUpdate,
        _non_empty(
            name=name,
            email=email,
            phone=phone,
            position=position,
            department=department,
            salary=salary,
            status=status,
        ),
    )
    changes = body.model_dump(mode="json", exclude_none=True)

    new_email = changes.get("email")
    if new_email and new_email.lower() != existing.email.lower() and store.get_employee_by_email(new_email):
        raise HTTPException(status_code=400, detail="EMAIL_TAKEN")

    if _has_photo(photo):
        changes["photo"] = save_photo(photo)

    try:
        updated = store.update_employee(employee_id, **changes)
    except DuplicateEmail:
        delete_photo(changes.get("photo"))
        raise HTTPException(status_code=400, detail="EMAIL_TAKEN")

    if updated is None:
        raise HTTPException(status_code=404, detail="EMPLOYEE_NOT_FOUND")

    if "photo" in changes:
        delete_photo(existing.photo)

    return EmployeeResponse(employee=_out(updated))


@router.delete("/{employee_id}", response_model=MessageResponse)
def delete_employee(employee_id: str, admin: Admin = Depends(get_current_admin)):
    store = get_storage()
    employee = store.get_employee(employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="EMPLOYEE_NOT_FOUND")

    delete_photo(employee.photo)
    if not store.delete_employee(employee_id):
        raise HTTPException(status_code=500, detail="EMPLOYEE_DELETE_FAILED")

    logger.info("employee deleted id=%s by admin=%s", employee_id, admin.id)
    return MessageResponse(message="Employee deleted successfully")
