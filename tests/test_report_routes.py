import pytest

from src.fellowship_reports.fellowship_reports.main import create_app


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _login(client, user_id):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id


def test_requires_login(client):
    res = client.get("/api/reports/e3")

    assert res.status_code == 401


def test_manager_gets_event_report(client):
    _login(client, "mgr")

    res = client.get("/api/reports/e3")

    assert res.status_code == 200
    body = res.get_json()
    assert body["stats"]["totalAttendance"] == 5
    assert body["scope"]["isFellowshipManager"] is True
    assert body["comparison"]["data"] == [1, 3, 5]


def test_leader_sees_report_only_after_publish(client):
    _login(client, "rh1")
    res = client.get("/api/reports/e3")
    assert res.status_code == 403
    assert res.get_json() == {"error": "Report not yet available"}

    _login(client, "mgr")
    assert client.post("/api/reports/e3/publish").status_code == 200
    assert client.get("/api/reports/e3/status").get_json()["isPublished"] is True

    _login(client, "rh1")
    res = client.get("/api/reports/e3")
    assert res.status_code == 200
    assert res.get_json()["stats"]["totalAttendance"] == 2


def test_leader_cannot_publish(client):
    _login(client, "tl1")

    res = client.post("/api/reports/e3/publish")

    assert res.status_code == 403
    assert res.get_json() == {"error": "This action is restricted to Fellowship Managers only"}


def test_unpublish_round_trip(client):
    _login(client, "mgr")
    client.post("/api/reports/e3/publish")

    res = client.post("/api/reports/e3/unpublish")

    assert res.status_code == 200
    assert res.get_json()["isPublished"] is False
    assert res.get_json()["publisher"] is None


def test_unknown_event_for_manager(client):
    _login(client, "mgr")

    assert client.get("/api/reports/nope").status_code == 404


def test_custom_report_requires_dates(client):
    _login(client, "mgr")

    res = client.get("/api/reports/custom?startDate=2026-02-01")

    assert res.status_code == 400


def test_custom_report_rejects_bad_dates(client):
    _login(client, "mgr")

    res = client.get("/api/reports/custom?startDate=01-02-2026&endDate=2026-03-05")

    assert res.status_code == 400


def test_custom_report(client):
    _login(client, "mgr")

    res = client.get("/api/reports/custom?startDate=2026-02-01&endDate=2026-03-05&type=TUESDAY_FELLOWSHIP")

    assert res.status_code == 200
    stats = res.get_json()["stats"]
    assert stats["totalEvents"] == 3
    assert stats["totalAttendance"] == 9


def test_custom_report_is_manager_only(client):
    _login(client, "rh1")

    res = client.get("/api/reports/custom?startDate=2026-02-01&endDate=2026-03-05")

    assert res.status_code == 403


def test_event_csv_export(client):
    _login(client, "mgr")

    res = client.get("/api/reports/e3/export/csv")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "event_report_e3.csv" in res.headers["Content-Disposition"]


def test_plain_member_scope_and_dashboard(client):
    _login(client, "plain")

    scope = client.get("/api/reports/scope").get_json()
    assert scope["isLeader"] is False
    assert scope["displayName"] == "No Scope"

    assert client.get("/api/reports/dashboard").status_code == 403
    assert client.get("/api/reports/published").status_code == 403


def test_dashboard_for_manager(client):
    _login(client, "mgr")

    res = client.get("/api/reports/dashboard")

    assert res.get_json() == {"totalMembers": 9, "totalEvents": 4, "averageAttendance": 3}


def test_health(client):
    assert client.get("/health").get_json()["settings"] == "config.testing"


def test_breakdowns_keep_count_order_in_json(client):
    _login(client, "mgr")

    body = client.get("/api/reports/e3").get_data(as_text=True)

    assert body.index('"CoCIS"') < body.index('"CEDAT"')
    assert body.index('"Makerere Students"') < body.index('"Alumni"')
