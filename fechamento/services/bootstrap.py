# fechamento/services/bootstrap.py
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import current_app
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Selection, MonthlyClosing, User, PasswordResetCode
from ..utils.calendar import local_today, zeroed_daily_values

logger = logging.getLogger(__name__)

CORE_TABLES = (Selection.__table__, MonthlyClosing.__table__)
# users first: password_reset_codes references it
AUTH_TABLES = (User.__table__, PasswordResetCode.__table__)


def ensure_table(table) -> bool:
    """
    Create `table` if the database does not have it yet.
    Errors are logged and reported as False so the remaining tables are still checked.
    """
    try:
        if inspect(db.engine).has_table(table.name):
            logger.info("Table %s already exists.", table.name)
            return True
        table.create(db.engine)
        logger.info("Table %s created.", table.name)
        return True
    except SQLAlchemyError:
        logger.exception("Failed to create/check table %s", table.name)
        return False


def ensure_selection(today: date) -> Optional[Selection]:
    if Selection.query.count() > 0:
        return None
    sel = Selection(year=today.year, month=today.month)
    db.session.add(sel)
    db.session.commit()
    logger.info("Selection seeded with %02d/%s.", today.month, today.year)
    return sel


def ensure_current_closing(today: date) -> Optional[MonthlyClosing]:
    existing = MonthlyClosing.query.filter_by(year=today.year, month=today.month).first()
    if existing:
        logger.info("A closing for %02d/%s already exists.", today.month, today.year)
        return None
    closing = MonthlyClosing(
        year=today.year,
        month=today.month,
        days_worked=0,
        max_goal=0,
        min_goal=0,
        daily_values=zeroed_daily_values(today.year, today.month),
        sum_values=0,
    )
    db.session.add(closing)
    db.session.commit()
    logger.info("Closing %s created for %02d/%s.", closing.id, today.month, today.year)
    return closing


def initialize_database(today: Optional[date] = None) -> None:
    """
    Idempotent startup sequence: core and auth tables, singleton selection, current month's closing.
    Must run inside an app context. Errors after the table checks propagate.
    """
    for table in CORE_TABLES + AUTH_TABLES:
        ensure_table(table)

    today = today or local_today(current_app.config["UTC_OFFSET_HOURS"])
    ensure_selection(today)
    ensure_current_closing(today)
