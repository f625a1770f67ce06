from datetime import datetime, timezone

from fastapi.testclient import TestClient

from yello_admin.config import settings
from yello_admin.main import app
from yello_admin.models.announcement import Announcement
from yello_admin.scheduler import VisibilityScheduler
from yello_admin.services.cron_log_service import CronLogService


def _seed_logs(db):
    service = CronLogService()
    service.create_log(db, "info", "Visibility update completed", {"activated_count": 1})
    service.create_log(db, "error", "Visibility update finished with errors", {"errors": [{"phase": "activate"}]})
    service.create_log(db, "info", "Visibility update completed", {"activated_count": 0})


def test_health_check(client):
    r = client.get("/healthy")
    assert r.status_code == 200
    assert r.json() == {"status": "Healthy"}


def test_list_cron_logs_newest_first(client, db_session):
    _seed_logs(db_session)

    r = client.get("/cron/logs")
    assert r.status_code == 200, r.text
    data = r.json()
    assert len(data) == 3
    assert data[0]["meta"] == {"activated_count": 0}
    assert data[-1]["meta"] == {"activated_count": 1}


def test_filter_cron_logs_by_level_and_paging(client, db_session):
    _seed_logs(db_session)

    errors = client.get("/cron/logs", params={"level": "error"}).json()
    assert len(errors) == 1
    assert errors[0]["meta"]["errors"][0]["phase"] == "activate"

    page = client.get("/cron/logs", params={"limit": 1, "skip": 1}).json()
    assert len(page) == 1
    assert page[0]["level"] == "error"


def test_filter_cron_logs_by_date(client, db_session):
    _seed_logs(db_session)

    assert len(client.get("/cron/logs", params={"start_date": "2000-01-01T00:00:00"}).json()) == 3
    assert client.get("/cron/logs", params={"end_date": "2000-01-01T00:00:00"}).json() == []


def test_status_when_scheduler_disabled(client):
    r = client.get("/cron/status")
    assert r.status_code == 200
    assert r.json()["running"] is False
    assert r.json()["run_count"] == 0


def test_manual_run_requires_scheduler(client):
    r = client.post("/cron/visibility/run")
    assert r.status_code == 503


def test_manual_run_flips_visibility(client, db_session, session_factory):
    bar = Announcement(
        slug="launch",
        visibility=False,
        scheduled_start=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    db_session.add(bar)
    db_session.commit()
    app.state.visibility_scheduler = VisibilityScheduler(session_factory, run_on_start=False)

    r = client.post("/cron/visibility/run")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["activated_count"] == 1
    assert body["deactivated_count"] == 0
    assert body["error"] is None

    db_session.expire_all()
    assert db_session.get(Announcement, bar.id).visibility is True

    status = client.get("/cron/status").json()
    assert status["run_count"] == 1
    assert status["last_result"]["activated_count"] == 1

    logs = client.get("/cron/logs").json()
    assert len(logs) == 1
    assert logs[0]["level"] == "info"


def test_manual_run_conflicts_with_run_in_flight(client, session_factory):
    scheduler = VisibilityScheduler(session_factory, run_on_start=False)
    app.state.visibility_scheduler = scheduler

    scheduler._run_lock.acquire()
    try:
        r = client.post("/cron/visibility/run")
    finally:
        scheduler._run_lock.release()
    assert r.status_code == 409


def test_lifespan_starts_and_stops_scheduler(monkeypatch):
    monkeypatch.setattr(settings, "SCHEDULER_ENABLED", True)
    monkeypatch.setattr(settings, "VISIBILITY_RUN_ON_START", False)

    with TestClient(app) as c:
        scheduler = app.state.visibility_scheduler
        assert isinstance(scheduler, VisibilityScheduler)
        status = c.get("/cron/status").json()
        assert status["running"] is True
        assert status["interval_minutes"] == settings.VISIBILITY_INTERVAL_MINUTES

    assert app.state.visibility_scheduler is None
    assert scheduler.is_running is False
