from datetime import date, datetime, timezone

import pytest
from sqlalchemy import inspect

from fechamento.extensions import db
from fechamento.models import MonthlyClosing, Selection
from fechamento.services import bootstrap
from fechamento.services.auth import create_user
from fechamento.utils.calendar import days_in_month, local_today

from .conftest import make_app


def test_startup_seeds_selection_and_current_month(app) -> None:
    today = local_today(app.config["UTC_OFFSET_HOURS"])
    with app.app_context():
        selections = Selection.query.all()
        assert len(selections) == 1
        assert (selections[0].year, selections[0].month) == (today.year, today.month)

        closing = MonthlyClosing.query.filter_by(year=today.year, month=today.month).one()
        assert len(closing.daily_values) == days_in_month(today.year, today.month)
        assert closing.daily_values[0] == {"day": 1, "value": 0}
        assert closing.sum_values == 0
        assert closing.days_worked == 0


def test_initialize_database_is_idempotent(app) -> None:
    with app.app_context():
        bootstrap.initialize_database()
        bootstrap.initialize_database()

        assert Selection.query.count() == 1
        assert MonthlyClosing.query.count() == 1


def test_initialize_database_sizes_days_to_calendar_month(app) -> None:
    with app.app_context():
        bootstrap.initialize_database(today=date(2024, 2, 10))
        bootstrap.initialize_database(today=date(2024, 2, 20))

        rows = MonthlyClosing.query.filter_by(year=2024, month=2).all()
        assert len(rows) == 1
        assert [e["day"] for e in rows[0].daily_values] == list(range(1, 30))
        # selection is only seeded when empty
        assert Selection.query.count() == 1


def test_initialize_database_creates_missing_tables() -> None:
    app = make_app(BOOTSTRAP_ON_START=False)
    with app.app_context():
        assert not inspect(db.engine).has_table("fechamento_mensal")

        bootstrap.initialize_database(today=date(2025, 7, 1))

        insp = inspect(db.engine)
        assert insp.has_table("selecionado")
        assert insp.has_table("fechamento_mensal")
        assert MonthlyClosing.query.filter_by(year=2025, month=7).count() == 1


def test_startup_failure_stops_the_process(monkeypatch) -> None:
    def broken(today=None):
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(bootstrap, "initialize_database", broken)

    with pytest.raises(SystemExit) as exc:
        make_app()
    assert exc.value.code == 1


def test_local_today_uses_fixed_offset() -> None:
    now = datetime(2024, 3, 1, 2, 30, tzinfo=timezone.utc)
    assert local_today(-3, now=now) == date(2024, 2, 29)
    assert local_today(0, now=now) == date(2024, 3, 1)


def test_startup_creates_auth_tables_so_login_works() -> None:
    app = make_app()
    with app.app_context():
        insp = inspect(db.engine)
        assert insp.has_table("users")
        assert insp.has_table("password_reset_codes")

    # no create_all: the startup sequence alone is enough
    with app.app_context():
        create_user("carla@example.com", "Carla", "pw-1234")

    client = app.test_client()
    res = client.post("/api/login", json={"email": "carla@example.com", "password": "pw-1234"})
    assert res.status_code == 200
    res = client.post("/api/forgot-password", json={"email": "carla@example.com"})
    assert res.status_code == 200
