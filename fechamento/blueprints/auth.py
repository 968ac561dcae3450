# fechamento/blueprints/auth.py
from __future__ import annotations

from flask import Blueprint, g

from ..auth_utils import login_required
from ..utils.http import json_body
from ..services import auth as svc

bp = Blueprint("auth", __name__)


@bp.post("/login")
def login():
    data = json_body()
    return svc.login(data.get("email"), data.get("password")), 200


@bp.get("/me")
@login_required
def me():
    return svc.get_current_user(g.user_id), 200


@bp.post("/forgot-password")
def forgot_password():
    data = json_body()
    svc.request_password_reset(data.get("email"))
    return {"message": "A reset code was sent to your email"}, 200


@bp.post("/reset-password")
def reset_password():
    data = json_body()
    svc.reset_password(data.get("email"), data.get("code"), data.get("newPassword"))
    return {"message": "Password updated"}, 200
