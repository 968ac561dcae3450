# fechamento/services/closings.py
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import MonthlyClosing
from ..errors import ValidationError, NotFound, Conflict
from ..utils.calendar import days_in_month

logger = logging.getLogger(__name__)

# DECIMAL(10, 2) columns
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")
MIN_YEAR, MAX_YEAR = 1, 9999


# ---------------------------
# Parsing helpers
# ---------------------------

def parse_amount(v: Any) -> Decimal:
    """
    Parse a JSON number or numeric string ("12.5", "12,5") into a finite Decimal.
    Raises ValueError for anything else (None, bools, NaN, garbage).
    """
    if v is None or isinstance(v, bool):
        raise ValueError(f"not a number: {v!r}")
    if isinstance(v, str):
        v = v.strip().replace(",", ".")
    try:
        d = Decimal(str(v))
    except InvalidOperation:
        raise ValueError(f"not a number: {v!r}") from None
    if not d.is_finite():
        raise ValueError(f"not a number: {v!r}")
    return d


def parse_int(v: Any) -> int:
    if v is None or isinstance(v, bool):
        raise ValueError(f"not an integer: {v!r}")
    if isinstance(v, float):
        if not v.is_integer():
            raise ValueError(f"not an integer: {v!r}")
        return int(v)
    return int(str(v).strip())


def _json_number(d: Decimal):
    """Decimal -> int/float for storage inside the JSON column."""
    return int(d) if d == d.to_integral_value() else float(d)


def _require_amount(v: Any, field: str, allow_negative: bool = True) -> Decimal:
    """Parsed amount rounded to cents, within what a DECIMAL(10, 2) column holds."""
    try:
        d = parse_amount(v)
    except ValueError:
        raise ValidationError(f"{field} must be a number")
    if abs(d) > MAX_AMOUNT:
        raise ValidationError(f"{field} must be between -{MAX_AMOUNT} and {MAX_AMOUNT}")
    d = d.quantize(CENT, rounding=ROUND_HALF_UP)
    if not allow_negative and d < 0:
        raise ValidationError(f"{field} must not be negative")
    return d


def _require_total(total: Decimal) -> Decimal:
    if abs(total) > MAX_AMOUNT:
        raise ValidationError(f"soma_valores would exceed {MAX_AMOUNT}")
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def _require_day(day: Any, year: int, month: int) -> int:
    try:
        d = parse_int(day)
    except ValueError:
        raise ValidationError("day must be an integer")
    last = days_in_month(year, month)
    if not 1 <= d <= last:
        raise ValidationError(f"day must be between 1 and {last}")
    return d


# ---------------------------
# Sum
# ---------------------------

def sum_daily_values(entries: Iterable[Optional[dict]]) -> Decimal:
    """
    Sum of entry values. Null holes are skipped; a stored value that does not
    parse counts as zero and is logged.
    """
    total = Decimal("0")
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            total += parse_amount(entry.get("value"))
        except ValueError:
            logger.warning("Ignoring non-numeric daily value %r for day %r", entry.get("value"), entry.get("day"))
    return total


# ---------------------------
# Queries
# ---------------------------

def list_closings() -> list[MonthlyClosing]:
    return MonthlyClosing.query.order_by(MonthlyClosing.year.asc(), MonthlyClosing.month.asc()).all()


def get_closing(closing_id: int) -> MonthlyClosing:
    closing = db.session.get(MonthlyClosing, closing_id)
    if not closing:
        raise NotFound("Monthly closing not found")
    return closing


def find_closing(year: int, month: int) -> Optional[MonthlyClosing]:
    return MonthlyClosing.query.filter_by(year=year, month=month).first()


# ---------------------------
# Writes
# ---------------------------

def set_day_value(closing_id: int, day: Any, value: Any) -> MonthlyClosing:
    """
    Overwrite the value at position day-1, or place a new {day, value} entry there.
    Missing positions before it stay null; they are not zero-filled.
    """
    closing = get_closing(closing_id)
    d = _require_day(day, closing.year, closing.month)
    amount = _json_number(_require_amount(value, "value"))

    values = list(closing.daily_values or [])
    idx = d - 1
    if idx < len(values) and isinstance(values[idx], dict):
        values[idx] = {**values[idx], "value": amount}
    else:
        if idx >= len(values):
            values.extend([None] * (idx + 1 - len(values)))
        values[idx] = {"day": d, "value": amount}

    # validated before the row is modified
    total = _require_total(sum_daily_values(values))

    # reassign so the JSON column is flagged dirty
    closing.daily_values = values
    closing.sum_values = total
    db.session.commit()
    logger.info("Closing %s: day %s set to %s", closing.id, d, amount)
    return closing


def build_daily_values(year: int, month: int, day_values: Optional[Iterable[dict]]) -> list[dict]:
    """Calendar-sized array filled from a sparse [{day, value}] list; missing days are 0."""
    if day_values is not None and not isinstance(day_values, list):
        raise ValidationError("day_values must be a list")
    provided: dict[int, Any] = {}
    for item in day_values or []:
        if not isinstance(item, dict):
            raise ValidationError("day_values entries must be objects with day and value")
        d = _require_day(item.get("day"), year, month)
        provided[d] = _json_number(_require_amount(item.get("value"), f"value for day {d}"))
    return [{"day": d, "value": provided.get(d, 0)} for d in range(1, days_in_month(year, month) + 1)]


def require_period(year: Any, month: Any) -> tuple[int, int]:
    """Validated (year, month): year in 1..9999, month in 1..12."""
    try:
        y, m = parse_int(year), parse_int(month)
    except ValueError:
        raise ValidationError("year and month must be integers")
    if not MIN_YEAR <= y <= MAX_YEAR or not 1 <= m <= 12:
        raise ValidationError(f"year must be between {MIN_YEAR} and {MAX_YEAR} and month between 1 and 12")
    return y, m


def _new_closing(year, month, days_worked=0, max_goal=0, min_goal=0, day_values=None) -> MonthlyClosing:
    y, m = require_period(year, month)
    try:
        worked = parse_int(days_worked or 0)
    except ValueError:
        raise ValidationError("days_worked must be an integer")
    if not 0 <= worked <= days_in_month(y, m):
        raise ValidationError(f"days_worked must be between 0 and {days_in_month(y, m)}")

    values = build_daily_values(y, m, day_values)
    return MonthlyClosing(
        year=y,
        month=m,
        days_worked=worked,
        max_goal=_require_amount(max_goal or 0, "max_goal", allow_negative=False),
        min_goal=_require_amount(min_goal or 0, "min_goal", allow_negative=False),
        daily_values=values,
        sum_values=_require_total(sum_daily_values(values)),
    )


def _commit_new(closings: list[MonthlyClosing]) -> None:
    seen = set()
    for c in closings:
        key = (c.year, c.month)
        if key in seen or find_closing(*key):
            db.session.rollback()
            raise Conflict(f"A closing for {c.month:02d}/{c.year} already exists")
        seen.add(key)
        db.session.add(c)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("A closing for this month already exists")


def create_closing(year, month, days_worked=0, max_goal=0, min_goal=0, day_values=None) -> MonthlyClosing:
    closing = _new_closing(year, month, days_worked, max_goal, min_goal, day_values)
    _commit_new([closing])
    logger.info("Created closing %s for %02d/%s (sum=%s)", closing.id, closing.month, closing.year, closing.sum_values)
    return closing


def create_closings_from_payload(years: Any) -> list[MonthlyClosing]:
    """
    Body shape:
      {Y: {months: {M: {days_worked, max_goal, min_goal, day_values}}}}
    Every (Y, M) pair is created in one commit.
    """
    if not isinstance(years, dict) or not years:
        raise ValidationError("years is required")

    closings: list[MonthlyClosing] = []
    for year, ydata in years.items():
        months = (ydata or {}).get("months") if isinstance(ydata, dict) else None
        if not isinstance(months, dict) or not months:
            raise ValidationError(f"months is required for year {year}")
        for month, m in months.items():
            m = m if isinstance(m, dict) else {}
            closings.append(_new_closing(
                year,
                month,
                days_worked=m.get("days_worked"),
                max_goal=m.get("max_goal"),
                min_goal=m.get("min_goal"),
                day_values=m.get("day_values"),
            ))

    _commit_new(closings)
    for c in closings:
        logger.info("Created closing %s for %02d/%s (sum=%s)", c.id, c.month, c.year, c.sum_values)
    return closings


def update_goals(closing_id: int, max_goal: Any = None, min_goal: Any = None) -> MonthlyClosing:
    closing = get_closing(closing_id)
    if max_goal is None and min_goal is None:
        raise ValidationError("meta_maxima or meta_minima is required")
    if max_goal is not None:
        closing.max_goal = _require_amount(max_goal, "meta_maxima", allow_negative=False)
    if min_goal is not None:
        closing.min_goal = _require_amount(min_goal, "meta_minima", allow_negative=False)
    db.session.commit()
    logger.info("Closing %s: goals max=%s min=%s", closing.id, closing.max_goal, closing.min_goal)
    return closing


def update_days_worked(closing_id: int, days_worked: Any) -> MonthlyClosing:
    closing = get_closing(closing_id)
    try:
        worked = parse_int(days_worked)
    except ValueError:
        raise ValidationError("dias_trabalhados must be an integer")
    last = days_in_month(closing.year, closing.month)
    if not 0 <= worked <= last:
        raise ValidationError(f"dias_trabalhados must be between 0 and {last}")
    closing.days_worked = worked
    db.session.commit()
    logger.info("Closing %s: days worked set to %s", closing.id, worked)
    return closing
