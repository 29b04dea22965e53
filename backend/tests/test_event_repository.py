from datetime import datetime, timedelta, timezone

import psycopg2
import pytest

from backend.errors import NotFound, PersistenceError
from backend.events_service.models import Event
from backend.events_service.repository import EventRepository


@pytest.fixture
def repo():
    return EventRepository()


def new_event(future_dt):
    return Event(
        title="My Event",
        long_description="This is a test event",
        short_description="Test",
        date_and_time=future_dt,
        organizer="Test Org",
        location="Test Location",
        status="draft",
    )


def test_create_normalizes_and_returns_id(repo, mock_db, future_dt):
    _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"id": 1}

    event = new_event(future_dt)
    assert repo.create(event) == 1

    args, _ = mock_cursor.execute.call_args
    assert "INSERT INTO events" in args[0]
    assert args[1] == (
        "my event", "This is a test event", "Test", future_dt, "test org", "test location", "draft"
    )
    assert event.id == 1
    assert event.title == "my event"
    assert event.short_description == "Test"


def test_create_wraps_driver_errors(repo, mock_db, future_dt):
    _, mock_cursor = mock_db
    mock_cursor.execute.side_effect = psycopg2.IntegrityError("constraint")

    with pytest.raises(PersistenceError):
        repo.create(new_event(future_dt))


def test_connection_failure_is_persistence_error(repo, mocker, future_dt):
    mocker.patch("backend.events_service.repository.get_db", side_effect=psycopg2.OperationalError("down"))

    with pytest.raises(PersistenceError):
        repo.get(1)


def test_get_returns_event(repo, mock_db, event_row):
    _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = event_row

    event = repo.get(1)

    assert event.id == 1
    assert event.title == "test event"
    assert mock_cursor.execute.call_args[0][1] == (1,)


def test_get_missing_raises_not_found(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None

    with pytest.raises(NotFound):
        repo.get(42)


def test_update_writes_every_field(repo, mock_db, future_dt):
    _, mock_cursor = mock_db
    mock_cursor.rowcount = 1
    event = new_event(future_dt)
    event.id = 5
    event.title = "Renamed EVENT"

    repo.update(event)

    args, _ = mock_cursor.execute.call_args
    assert args[0].strip().startswith("UPDATE events")
    assert args[1][0] == "renamed event"
    assert args[1][-1] == 5
    assert event.title == "renamed event"


def test_update_zero_rows_is_not_found(repo, mock_db, future_dt):
    _, mock_cursor = mock_db
    mock_cursor.rowcount = 0
    event = new_event(future_dt)
    event.id = 99

    with pytest.raises(NotFound):
        repo.update(event)


def test_delete(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.rowcount = 1
    repo.delete(3)
    assert mock_cursor.execute.call_args[0][1] == (3,)


def test_delete_zero_rows_is_not_found(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.rowcount = 0
    with pytest.raises(NotFound):
        repo.delete(3)


def test_get_all_without_filters(repo, mock_db, event_row):
    _, mock_cursor = mock_db
    mock_cursor.fetchall.return_value = [event_row]

    events = repo.get_all(limit=10, offset=0)

    sql, params = mock_cursor.execute.call_args[0]
    assert "WHERE" not in sql
    assert "LIMIT %s OFFSET %s" in sql
    assert params == [10, 0]
    assert [e.id for e in events] == [1]


def test_get_all_with_every_filter(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.fetchall.return_value = []
    start = datetime(2030, 1, 1, tzinfo=timezone.utc)
    end = start + timedelta(days=1, seconds=-1)

    events = repo.get_all(start, end, "published", "Party", 5, 10)

    sql, params = mock_cursor.execute.call_args[0]
    assert "WHERE status = %s AND title LIKE %s AND date_and_time >= %s AND date_and_time <= %s" in sql
    assert params == ["published", "%party%", start, end, 5, 10]
    assert events == []


def test_get_total_count_uses_same_filters(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"total": 23}

    total = repo.get_total_count("draft", "", None, None)

    sql, params = mock_cursor.execute.call_args[0]
    assert "COUNT(*)" in sql
    assert "WHERE status = %s" in sql
    assert params == ["draft"]
    assert total == 23


def test_get_all_wraps_driver_errors(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.execute.side_effect = psycopg2.OperationalError("boom")

    with pytest.raises(PersistenceError):
        repo.get_all()
