# fechamento/services/auth.py
from __future__ import annotations

import logging
import smtplib

from flask import current_app
from flask_mail import Message
from sqlalchemy.exc import IntegrityError

from ..extensions import db, mail
from ..models import User, PasswordResetCode
from ..errors import ValidationError, Unauthorized, NotFound, Conflict, InternalError
from ..auth_utils import (
    hash_password,
    verify_password,
    mint_access,
    mint_reset_code,
    reset_code_expiry,
)
from ..utils.calendar import utcnow_naive

logger = logging.getLogger(__name__)


def _normalize_email(email) -> str:
    return email.strip().lower() if isinstance(email, str) else ""


def user_json(u: User) -> dict:
    return {"id": u.id, "name": u.name, "email": u.email}


def find_user_by_email(email):
    return User.query.filter_by(email=_normalize_email(email)).first()


# ---------- login / session ----------

def login(email, password) -> dict:
    user = find_user_by_email(email)
    # same answer for unknown email and wrong password
    if (
        not user
        or not isinstance(password, str)
        or not password
        or not verify_password(password, user.password_hash)
    ):
        logger.info("Failed login for %r", _normalize_email(email))
        raise Unauthorized("Email or password is incorrect")
    logger.info("User %s logged in", user.id)
    return {"auth": True, "token": mint_access(user.id), "user": user_json(user)}


def get_current_user(user_id: int) -> dict:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user_json(user)


# ---------- password reset ----------

def send_reset_email(user: User, code: str) -> None:
    ttl_min = current_app.config["RESET_CODE_TTL_MIN"]
    msg = Message(
        subject="Password reset code",
        recipients=[user.email],
        body=(
            f"Hello {user.name},\n\n"
            f"Your password reset code is {code}.\n"
            f"It expires in {ttl_min} minutes.\n"
        ),
    )
    mail.send(msg)


def request_password_reset(email) -> None:
    """
    Store a fresh 6-digit code for the user and email it.
    The code row is only committed once the email went out.
    """
    if not _normalize_email(email):
        raise ValidationError("email is required")
    user = find_user_by_email(email)
    if not user:
        raise NotFound("User not found")

    code = mint_reset_code()
    db.session.add(PasswordResetCode(user_id=user.id, code=code, expires_at=reset_code_expiry()))
    db.session.flush()
    try:
        send_reset_email(user, code)
    except (smtplib.SMTPException, OSError) as e:
        db.session.rollback()
        logger.error("Could not send reset email to user %s: %s", user.id, e)
        raise InternalError("Could not send the reset email")
    db.session.commit()
    logger.info("Password reset code issued for user %s", user.id)


def reset_password(email, code, new_password) -> None:
    if not _normalize_email(email) or not code or not new_password:
        raise ValidationError("email, code and newPassword are required")
    if not isinstance(new_password, str):
        raise ValidationError("newPassword must be a string")

    row = (
        PasswordResetCode.query
        .join(User, User.id == PasswordResetCode.user_id)
        .filter(
            User.email == _normalize_email(email),
            PasswordResetCode.code == str(code).strip(),
            PasswordResetCode.expires_at > utcnow_naive(),
        )
        .order_by(PasswordResetCode.id.desc())
        .first()
    )
    if not row:
        raise ValidationError("Invalid or expired code")

    user = row.user
    user.password_hash = hash_password(new_password)
    # single use: drop every outstanding code of this user
    PasswordResetCode.query.filter_by(user_id=user.id).delete()
    db.session.commit()
    logger.info("Password reset for user %s", user.id)


# ---------- operator helpers ----------

def create_user(email, name, password) -> User:
    """Users are owned elsewhere; this exists for seeding and local setups."""
    email = _normalize_email(email)
    if not email or not name or not password:
        raise ValidationError("email, name and password are required")
    user = User(email=email, name=name.strip(), password_hash=hash_password(password))
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Email already registered")
    return user
