from fechamento.models import Selection
from fechamento.services.selection import set_selection
from fechamento.extensions import db


def test_get_selection_returns_singleton(client, auth_headers) -> None:
    res = client.get("/api/selecionado", headers=auth_headers)
    assert res.status_code == 200
    rows = res.get_json()
    assert len(rows) == 1
    assert set(rows[0]) == {"id", "ano", "mes"}


def test_put_selection_updates_same_row(client, auth_headers) -> None:
    before = client.get("/api/selecionado", headers=auth_headers).get_json()[0]

    res = client.put("/api/selecionado", json={"ano": 2022, "mes": 11}, headers=auth_headers)
    assert res.status_code == 200

    rows = client.get("/api/selecionado", headers=auth_headers).get_json()
    assert rows == [{"id": before["id"], "ano": 2022, "mes": 11}]


def test_put_selection_missing_month_leaves_row_unchanged(client, auth_headers) -> None:
    before = client.get("/api/selecionado", headers=auth_headers).get_json()

    res = client.put("/api/selecionado", json={"ano": 2022}, headers=auth_headers)
    assert res.status_code == 400
    assert res.get_json()["error"] == "ano and mes are required"

    assert client.get("/api/selecionado", headers=auth_headers).get_json() == before


def test_put_selection_rejects_invalid_month(client, auth_headers) -> None:
    for body in ({"ano": 2022, "mes": 13}, {"ano": 2022, "mes": 0}, {"ano": "x", "mes": 2}):
        assert client.put("/api/selecionado", json=body, headers=auth_headers).status_code == 400


def test_selection_requires_a_token(client) -> None:
    assert client.get("/api/selecionado").status_code == 401
    assert client.put("/api/selecionado", json={"ano": 2022, "mes": 1}).status_code == 401


def test_set_selection_recreates_missing_row(app) -> None:
    with app.app_context():
        Selection.query.delete()
        db.session.commit()

        sel = set_selection(2021, 3)

        assert Selection.query.count() == 1
        assert (sel.year, sel.month) == (2021, 3)


def test_put_selection_rejects_year_out_of_range(client, auth_headers) -> None:
    before = client.get("/api/selecionado", headers=auth_headers).get_json()
    for year in (0, 10000, 10**30):
        res = client.put("/api/selecionado", json={"ano": year, "mes": 1}, headers=auth_headers)
        assert res.status_code == 400
    assert client.get("/api/selecionado", headers=auth_headers).get_json() == before


def test_put_selection_rejects_array_body(client, auth_headers) -> None:
    res = client.put("/api/selecionado", json=[2022, 5], headers=auth_headers)
    assert res.status_code == 400
