import pytest

from backend.database.init_db import init_db, create_initial_admin


def test_init_db_creates_tables(mock_db):
    _, mock_cursor = mock_db

    init_db()

    sql = mock_cursor.execute.call_args[0][0]
    for table in ["users", "events", "user_events"]:
        assert f"CREATE TABLE IF NOT EXISTS {table}" in sql
    assert "PRIMARY KEY (user_id, event_id)" in sql


def test_admin_seeded_when_none_exists(mocker, monkeypatch):
    monkeypatch.setenv("ADMIN_USERNAME", "root")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret!")
    repo = mocker.Mock()
    repo.count_admins.return_value = 0

    assert create_initial_admin(repo) is True

    user = repo.create.call_args[0][0]
    assert user.username == "root"
    assert user.is_admin is True
    assert user.password != "s3cret!"


def test_admin_not_seeded_twice(mocker):
    repo = mocker.Mock()
    repo.count_admins.return_value = 1

    assert create_initial_admin(repo) is False
    repo.create.assert_not_called()


def test_missing_admin_credentials_is_fatal(mocker, monkeypatch):
    monkeypatch.delenv("ADMIN_USERNAME", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    repo = mocker.Mock()
    repo.count_admins.return_value = 0

    with pytest.raises(RuntimeError):
        create_initial_admin(repo)
