# fechamento/blueprints/selection.py
from __future__ import annotations

from flask import Blueprint, jsonify

from ..auth_utils import login_required
from ..utils.http import json_body
from ..services.selection import get_selection, set_selection

bp = Blueprint("selection", __name__)


@bp.get("/selecionado")
@login_required
def list_selection():
    return jsonify([s.to_dict() for s in get_selection()])


@bp.put("/selecionado")
@login_required
def update_selection():
    """Body: { ano, mes }"""
    d = json_body()
    set_selection(d.get("ano"), d.get("mes"))
    return {"message": "Selection updated"}, 200
