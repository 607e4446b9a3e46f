# routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from deps.auth import get_current_admin
from schemas import (
    AdminOut,
    AdminResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileUpdateRequest,
)
from security import create_access_token, verify_password
from services.redaction import redact_text
from storage import Admin, DuplicateEmail, get_storage

logger = logging.getLogger("hrdesk.auth")
router = APIRouter(prefix="/api/v1/admin", tags=["auth"])


def _admin_out(admin: Admin) -> AdminOut:
    return AdminOut(**admin.public())


@router.post("/auth/login", response_model=LoginResponse)
def login(body: LoginRequest):
    admin = get_storage().get_admin_by_email(body.email)

    if admin is None or not verify_password(body.password, admin.password_hash):
        logger.info("admin login failed email=%s", redact_text(body.email))
        raise HTTPException(status_code=401, detail="INVALID_CREDENTIALS")

    token = create_access_token(sub=admin.id)
    return LoginResponse(access_token=token, admin=_admin_out(admin))


@router.get("/auth/me", response_model=AdminResponse)
def me(admin: Admin = Depends(get_current_admin)):
    return AdminResponse(admin=_admin_out(admin))


@router.post("/auth/logout", response_model=MessageResponse)
def logout(admin: Admin = Depends(get_current_admin)):
    # Tokens are stateless; the dashboard drops its copy
    return MessageResponse(message="Logged out successfully")


@router.put("/profile", response_model=AdminResponse)
def update_profile(body: ProfileUpdateRequest, admin: Admin = Depends(get_current_admin)):
    changes = {}
    if body.name:
        changes["name"] = body.name
    if body.email:
        changes["email"] = str(body.email)
    if body.phone:
        changes["phone"] = body.phone

    if body.new_password:
        if not body.current_password or not verify_password(body.current_password, admin.password_hash):
            raise HTTPException(status_code=400, detail="CURRENT_PASSWORD_INCORRECT")
        changes["password"] = body.new_password

    try:
        updated = get_storage().update_admin(admin.id, **changes)
    except DuplicateEmail:
        raise HTTPException(status_code=400, detail="EMAIL_TAKEN")

    if updated is None:
        raise HTTPException(status_code=404, detail="ADMIN_NOT_FOUND")
    return AdminResponse(admin=_admin_out(updated))
