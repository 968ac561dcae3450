# fechamento/blueprints/closings.py
from __future__ import annotations

from flask import Blueprint, jsonify

from ..auth_utils import login_required
from ..utils.http import json_body
from ..services import closings as svc

bp = Blueprint("closings", __name__)


@bp.get("/fechamentos")
@login_required
def list_closings():
    return jsonify([c.to_dict() for c in svc.list_closings()])


@bp.get("/fechamentos/<int:closing_id>")
@login_required
def get_closing(closing_id: int):
    return svc.get_closing(closing_id).to_dict(), 200


@bp.put("/fechamentos/<int:closing_id>/dia/<day>")
@login_required
def set_day_value(closing_id: int, day: str):
    """Body: { value }"""
    d = json_body()
    svc.set_day_value(closing_id, day, d.get("value"))
    return {"message": "Value saved"}, 200


@bp.post("/fechamentos")
@login_required
def create_closings():
    """
    Body:
      { years: { "2024": { months: { "5": {
          days_worked, max_goal, min_goal, day_values: [{day, value}, ...]
      } } } } }
    """
    d = json_body()
    created = svc.create_closings_from_payload(d.get("years"))
    return {"message": "Monthly closing created", "ids": [c.id for c in created]}, 201


@bp.put("/fechamentos/<int:closing_id>/meta")
@login_required
def update_goals(closing_id: int):
    """Body: { meta_maxima?, meta_minima? }"""
    d = json_body()
    svc.update_goals(closing_id, d.get("meta_maxima"), d.get("meta_minima"))
    return {"message": "Goals updated"}, 200


@bp.put("/fechamentos/<int:closing_id>/dias-trabalhados")
@login_required
def update_days_worked(closing_id: int):
    """Body: { dias_trabalhados }"""
    d = json_body()
    svc.update_days_worked(closing_id, d.get("dias_trabalhados"))
    return {"message": "Days worked updated"}, 200
