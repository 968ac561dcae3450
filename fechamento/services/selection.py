# fechamento/services/selection.py
from __future__ import annotations

import logging
from typing import Any, Optional

from ..extensions import db
from ..models import Selection
from ..errors import ValidationError
from .closings import require_period

logger = logging.getLogger(__name__)


def get_selection() -> list[Selection]:
    return Selection.query.order_by(Selection.id.asc()).all()


def current_selection() -> Optional[Selection]:
    """The singleton row: the one with the lowest id."""
    return Selection.query.order_by(Selection.id.asc()).first()


def set_selection(year: Any, month: Any) -> Selection:
    if year in (None, "") or month in (None, ""):
        raise ValidationError("ano and mes are required")
    y, m = require_period(year, month)

    sel = current_selection()
    if sel is None:
        sel = Selection(year=y, month=m)
        db.session.add(sel)
        logger.warning("Selection table was empty; creating the singleton row")
    else:
        sel.year, sel.month = y, m
    db.session.commit()
    logger.info("Selection set to %02d/%s", m, y)
    return sel
