"""
Local SQLite feed: snapshot delivery, roster filtering and failure reporting.
"""
from datetime import datetime, timedelta

import pytest

from intake_board.config import load_settings
from intake_board.feed.local_feed import LocalFeed, create_local_feed
from intake_board.feed.reconciler import Banner, FeedReconciler, FeedState
from intake_board.storage.database import Database, intake_sort_key


@pytest.fixture
def db(tmp_path):
    db = Database(str(tmp_path / "intake.db"), project_id="shop-test")
    db.connect()
    db.initialize_schema()
    yield db
    db.close()


@pytest.fixture
def feed(db):
    return LocalFeed(db)


class Recorder:
    def __init__(self):
        self.snapshots = []
        self.errors = []

    def on_snapshot(self, documents):
        self.snapshots.append(documents)

    def on_error(self, exc):
        self.errors.append(exc)


def test_subscribe_delivers_current_snapshot(feed):
    feed.put_order("ST-1", {"customer_name": "Early Bird"})
    recorder = Recorder()

    feed.subscribe_orders(recorder.on_snapshot, recorder.on_error)

    assert len(recorder.snapshots) == 1
    assert recorder.snapshots[0][0].id == "ST-1"
    assert recorder.snapshots[0][0].data == {"customer_name": "Early Bird"}


def test_writes_push_full_snapshots(feed):
    recorder = Recorder()
    feed.subscribe_orders(recorder.on_snapshot, recorder.on_error)

    feed.put_order("ST-1", {"status": "Intake"})
    feed.put_order("ST-2", {"status": "Quote"})
    feed.put_order("ST-1", {"status": "Diagnosis"})

    assert [len(s) for s in recorder.snapshots] == [0, 1, 2, 2]
    latest = {doc.id: doc.data["status"] for doc in recorder.snapshots[-1]}
    assert latest == {"ST-1": "Diagnosis", "ST-2": "Quote"}


def test_orders_newest_first(feed, now):
    feed.put_order("OLD", {"intake_date": (now - timedelta(hours=10)).isoformat()})
    feed.put_order("NEW", {"intake_date": (now - timedelta(hours=1)).isoformat()})
    feed.put_order("UNDATED", {})
    recorder = Recorder()

    feed.subscribe_orders(recorder.on_snapshot, recorder.on_error)

    assert [doc.id for doc in recorder.snapshots[0]] == ["NEW", "OLD", "UNDATED"]


def test_roster_only_includes_technicians(feed):
    recorder = Recorder()
    feed.subscribe_technicians(recorder.on_snapshot, recorder.on_error)

    feed.put_user("tec-01", {"name": "Laura Diaz", "role": "technician"})
    feed.put_user("rec-01", {"name": "Front Desk", "role": "reception"})

    assert [doc.id for doc in recorder.snapshots[-1]] == ["tec-01"]


def test_unsubscribe_stops_delivery(feed):
    recorder = Recorder()
    unsubscribe = feed.subscribe_orders(recorder.on_snapshot, recorder.on_error)
    assert feed.listener_count == 1

    unsubscribe()
    unsubscribe()
    feed.put_order("ST-1", {})

    assert feed.listener_count == 0
    assert len(recorder.snapshots) == 1


def test_read_failure_goes_to_on_error(feed, db):
    recorder = Recorder()
    feed.subscribe_orders(recorder.on_snapshot, recorder.on_error)

    db.conn.close()
    feed.publish_orders()

    assert len(recorder.errors) == 1
    assert len(recorder.snapshots) == 1


def test_projects_are_isolated(tmp_path):
    path = str(tmp_path / "shared.db")
    first = Database(path, project_id="shop-a")
    second = Database(path, project_id="shop-b")
    for db in (first, second):
        db.connect()
        db.initialize_schema()

    first.upsert_order("ST-1", {})

    assert first.count_orders() == 1
    assert second.count_orders() == 0


def test_reconciler_over_local_feed(feed, now):
    feed.put_order("ST-1", {
        "customer_name": "Lucia Fernandez",
        "status": "Diagnosis",
        "intake_date": (now - timedelta(hours=3)).isoformat(),
    })

    with FeedReconciler(feed, configured=True, clock=lambda: now) as reconciler:
        view = reconciler.view()
        assert view.state == FeedState.LIVE
        assert [o.order_id for o in view.data.orders] == ["ST-1"]

        feed.clear()
        view = reconciler.view()
        assert view.state == FeedState.DEGRADED
        assert view.banner == Banner.WARNING

    assert feed.listener_count == 0


def test_create_local_feed(tmp_path):
    unconfigured = load_settings(environ={})
    configured = load_settings(environ={
        "INTAKE_FEED_PROJECT_ID": "shop-test",
        "INTAKE_FEED_DATABASE_PATH": str(tmp_path / "feed" / "intake.db"),
    })

    assert create_local_feed(unconfigured) is None

    feed = create_local_feed(configured)
    try:
        assert feed.db.project_id == "shop-test"
        assert (tmp_path / "feed" / "intake.db").exists()
    finally:
        feed.db.close()


def test_refresh_picks_up_writes_from_another_connection(tmp_path, now):
    path = str(tmp_path / "shared.db")
    session_a = create_local_feed(load_settings(environ={
        "INTAKE_FEED_PROJECT_ID": "shop-test", "INTAKE_FEED_DATABASE_PATH": path,
    }))
    session_b = create_local_feed(load_settings(environ={
        "INTAKE_FEED_PROJECT_ID": "shop-test", "INTAKE_FEED_DATABASE_PATH": path,
    }))
    try:
        session_a.put_order("ST-1", {"intake_date": (now - timedelta(hours=2)).isoformat()})
        with FeedReconciler(session_a, configured=True, clock=lambda: now) as reconciler:
            session_a.refresh()

            session_b.put_order("ST-2", {"intake_date": (now - timedelta(hours=1)).isoformat()})
            assert [o.order_id for o in reconciler.view().data.orders] == ["ST-1"]

            assert session_a.refresh() is True
            assert sorted(o.order_id for o in reconciler.view().data.orders) == ["ST-1", "ST-2"]
            assert reconciler.state == FeedState.LIVE

            assert session_a.refresh() is False
    finally:
        session_a.db.close()
        session_b.db.close()


def test_refresh_failure_goes_to_on_error(feed, db):
    recorder = Recorder()
    feed.subscribe_technicians(recorder.on_snapshot, recorder.on_error)

    db.conn.close()

    assert feed.refresh() is False
    assert len(recorder.errors) == 1


def test_out_of_range_intake_date_sorts_last(feed):
    feed.put_order("ST-OLD", {"intake_date": "0001-01-01T00:00:00+05:00"})
    feed.put_order("ST-NEW", {"intake_date": "2024-03-04T10:00:00+00:00"})
    recorder = Recorder()

    feed.subscribe_orders(recorder.on_snapshot, recorder.on_error)

    assert intake_sort_key("0001-01-01T00:00:00+05:00") is None
    assert [doc.id for doc in recorder.snapshots[0]] == ["ST-NEW", "ST-OLD"]


def test_naive_and_aware_dates_share_one_clock():
    naive = datetime(2024, 3, 4, 9, 30)

    assert intake_sort_key(naive.isoformat()) == intake_sort_key(naive.astimezone().isoformat())
    assert intake_sort_key("2024-03-04T09:30:00+02:00") == "2024-03-04T07:30:00"
