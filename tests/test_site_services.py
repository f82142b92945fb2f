"""Auth, delivery estimate, private access and analytics service tests."""

from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from service.analytics_service import AnalyticsService
from service.auth_service import AuthService
from service.estimate_service import EstimateService
from service.private_access_service import PrivateAccessService
from tests.fakes import (
    FakeAnalyticsStore,
    FakeRecordStore,
    FakeSessionStore,
    run,
    seed_catalog,
)
from util.enums import Kind, Severity

# ---------------- Auth ----------------


def _auth(sessions: FakeSessionStore) -> AuthService:
    return AuthService(sessions, email="admin@example.com", password="pw", ttl_seconds=60)


def test_sign_in_opens_session() -> None:
    sessions = FakeSessionStore()
    auth = _auth(sessions)

    resp = run(auth.sign_in(" Admin@Example.com ", "pw"))

    assert resp.expiresIn == 60
    assert run(auth.get_session(resp.token)) == "admin@example.com"


def test_sign_in_rejects_bad_password() -> None:
    sessions = FakeSessionStore()
    with pytest.raises(HTTPException) as exc:
        run(_auth(sessions).sign_in("admin@example.com", "nope"))

    assert exc.value.status_code == 401
    assert sessions.sessions == {}


def test_sign_out_ends_session() -> None:
    sessions = FakeSessionStore()
    auth = _auth(sessions)
    token = run(auth.sign_in("admin@example.com", "pw")).token

    run(auth.sign_out(token))

    assert run(auth.get_session(token)) is None
    assert run(auth.get_session(None)) is None


# ---------------- Delivery estimate ----------------


def test_estimate_without_progress_row() -> None:
    resp = run(EstimateService(FakeRecordStore()).current())

    assert resp.thumbnailsInProgress == 0
    assert resp.severity == Severity.FAST
    assert resp.lastUpdated == "Unknown"


def test_set_progress_updates_single_row() -> None:
    records = FakeRecordStore()
    service = EstimateService(records)

    run(service.set_progress(7))
    run(service.set_progress(12))

    assert len(records.tables[str(Kind.PROGRESS_TRACKER)]) == 1
    resp = run(service.current())
    assert resp.thumbnailsInProgress == 12
    assert resp.timeLabel == "48 hours"
    assert resp.status == "Busy Period"


def test_estimate_last_updated_text() -> None:
    records = FakeRecordStore()
    records.seed(
        Kind.PROGRESS_TRACKER, thumbnails_in_progress=3, updated_at="2024-05-01T10:00:00+00:00"
    )
    now = datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc)

    resp = run(EstimateService(records).current(now))

    assert resp.lastUpdated == "3 hours ago"


# ---------------- Private access ----------------


def test_private_password_check() -> None:
    service = PrivateAccessService(FakeRecordStore(), password="open")

    service.check_password("open")
    with pytest.raises(HTTPException) as exc:
        service.check_password("closed")
    assert exc.value.detail == "Incorrect password. Please try again."


@pytest.mark.parametrize(
    ("name", "email", "message", "detail"),
    [
        ("", "a@b.co", "hi", "Please fill in all fields"),
        ("Sam", "a@b.co", "   ", "Please fill in all fields"),
        ("Sam", "not-an-email", "hi", "Please enter a valid email address"),
    ],
)
def test_private_submit_validates_before_store(name, email, message, detail) -> None:
    records = FakeRecordStore()
    records.fail_ops.add("insert")

    with pytest.raises(HTTPException) as exc:
        run(PrivateAccessService(records, password="x").submit(name, email, message))

    assert exc.value.status_code == 422
    assert exc.value.detail == detail


def test_private_submit_stores_trimmed_fields() -> None:
    records = FakeRecordStore()
    service = PrivateAccessService(records, password="x")

    run(service.submit(" Sam ", "sam@example.com", " Hello "))
    run(service.submit("Ana", "ana@example.com", "Second"))

    assert [s.name for s in run(service.submissions())] == ["Ana", "Sam"]
    assert run(service.submissions())[1].message == "Hello"


def test_private_submit_store_failure() -> None:
    records = FakeRecordStore()
    records.fail_ops.add("insert")

    with pytest.raises(HTTPException) as exc:
        run(PrivateAccessService(records, password="x").submit("Sam", "a@b.co", "hi"))

    assert exc.value.status_code == 502
    assert exc.value.detail == "Error submitting form. Please try again."


# ---------------- Analytics ----------------


def test_visits_increment_per_day() -> None:
    analytics = FakeAnalyticsStore()
    service = AnalyticsService(FakeRecordStore(), analytics)

    assert run(service.track_visit("2024-05-01")) == 1
    assert run(service.track_visit("2024-05-01")) == 2
    assert run(service.track_visit("2024-05-02")) == 1


def test_summary_ranks_top_clicked_items() -> None:
    records = FakeRecordStore()
    seed_catalog(records)
    analytics = FakeAnalyticsStore()
    analytics.visits = {"2024-05-01": 4, "2024-05-02": 3}
    analytics.clicks = {"item-1": (2, None), "item-3": (9, None), "gone": (1, None)}

    summary = run(AnalyticsService(records, analytics, top_n=2).summary("2024-05-02"))

    assert (summary.totalVisits, summary.todayVisits, summary.totalClicks) == (7, 3, 12)
    assert [(t.itemId, t.clicks) for t in summary.topItems] == [("item-3", 9), ("item-1", 2)]
    assert summary.topItems[0].item.id == "item-3"


def test_dashboard_counts() -> None:
    records = FakeRecordStore()
    seed_catalog(records)

    counts = run(AnalyticsService(records, FakeAnalyticsStore()).dashboard_counts())

    assert (counts.portfolioItems, counts.categories, counts.faqs) == (4, 3, 0)
