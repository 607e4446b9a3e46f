from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from settings import settings

# Dashboard tokens only; anything else signed with the same secret is refused
ADMIN_TOKEN_TYPE = "admin_access"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# -----------------------
# Password hashing
# -----------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # unknown / malformed hash
        return False


# -----------------------
# Admin access tokens (JWT)
# -----------------------
def create_access_token(sub: str, minutes: Optional[int] = None) -> str:
    issued = datetime.now(timezone.utc)
    expires = issued + timedelta(minutes=minutes or settings.JWT_ACCESS_MINUTES)
    claims = {
        "sub": sub,
        "typ": ADMIN_TOKEN_TYPE,
        "iat": int(issued.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str) -> Dict[str, Any]:
    """Claims of a valid admin token, or {} for anything expired, forged or foreign."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        return {}
    if claims.get("typ") != ADMIN_TOKEN_TYPE:
        return {}
    return claims
