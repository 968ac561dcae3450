# fechamento/auth_utils.py
from __future__ import annotations

import time
import secrets
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Optional, Dict, Any

import jwt
from flask import current_app, g, request
from passlib.hash import pbkdf2_sha256 as pwd_hasher

from .errors import Unauthorized


# ---------------------------
# Password hashing utilities
# ---------------------------

def hash_password(plain: str) -> str:
    return pwd_hasher.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_hasher.verify(plain, hashed)
    except ValueError:
        # stored value is not a pbkdf2_sha256 hash
        return False


# ---------------------------
# Time helpers
# ---------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _now_unix() -> int:
    return int(time.time())


# ---------------------------
# Access token (JWT)
# ---------------------------

def mint_access(user_id: int) -> str:
    """
    Create a short-lived access JWT signed with HS256.
    Claims: sub, iss, iat, exp
    """
    cfg = current_app.config
    now = _now_unix()
    payload = {
        "sub": str(user_id),
        "iss": cfg["JWT_ISS"],
        "iat": now,
        "exp": now + cfg["ACCESS_TTL_SEC"],
    }
    return jwt.encode(payload, cfg["SECRET_KEY"], algorithm="HS256")


def decode_access(token: str) -> Dict[str, Any]:
    """
    Decode and verify an access JWT.
    Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on problems.
    """
    cfg = current_app.config
    return jwt.decode(
        token,
        cfg["SECRET_KEY"],
        algorithms=["HS256"],
        issuer=cfg["JWT_ISS"],
        options={"require": ["exp", "sub"]},
    )


def verify_token(token: Optional[str]) -> int:
    """Return the user id carried by `token`, or raise Unauthorized."""
    if not token:
        raise Unauthorized("No token provided")
    try:
        claims = decode_access(token)
        return int(claims["sub"])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except (jwt.InvalidTokenError, ValueError):
        raise Unauthorized("Invalid token")


# ---------------------------
# Password reset codes
# ---------------------------

def mint_reset_code() -> str:
    """6-digit numeric code, zero padded."""
    return f"{secrets.randbelow(1_000_000):06d}"


def reset_code_expiry(now: Optional[datetime] = None) -> datetime:
    """Naive UTC expiry for a code issued at `now`."""
    now = now or _utcnow()
    return (now + timedelta(minutes=current_app.config["RESET_CODE_TTL_MIN"])).replace(tzinfo=None)


# ---------------------------
# HTTP helpers
# ---------------------------

def bearer_from_auth_header(authorization: Optional[str]) -> Optional[str]:
    """
    Extract 'Bearer <token>' value from an Authorization header.
    """
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def token_from_request() -> Optional[str]:
    token = request.headers.get(current_app.config["AUTH_HEADER"])
    if token:
        return token.strip()
    return bearer_from_auth_header(request.headers.get("Authorization"))


def login_required(view):
    """Reject the request with 401 unless it carries a valid token; sets g.user_id."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.user_id = verify_token(token_from_request())
        return view(*args, **kwargs)
    return wrapper
