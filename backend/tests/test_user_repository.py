import psycopg2
import psycopg2.errors
import pytest

from backend.auth_service.models import User
from backend.auth_service.repository import UserRepository
from backend.errors import NotFound, PersistenceError, ValidationError


@pytest.fixture
def repo():
    return UserRepository()


def test_create_returns_id(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"id": 4}

    user = User(username="alice", password="hashed", is_admin=False)
    assert repo.create(user) == 4
    assert user.id == 4
    assert mock_cursor.execute.call_args[0][1] == ("alice", "hashed", False)


def test_create_duplicate_username(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.execute.side_effect = psycopg2.errors.UniqueViolation("duplicate")

    with pytest.raises(ValidationError) as exc:
        repo.create(User(username="alice", password="hashed"))
    assert exc.value.message == "Username already exists"


def test_get_by_username(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {"id": 4, "username": "alice", "password": "hashed", "is_admin": True}

    user = repo.get_by_username("alice")
    assert user.is_admin is True
    assert "password" not in user.to_dict()


def test_get_by_username_missing(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None
    with pytest.raises(NotFound):
        repo.get_by_username("nobody")


def test_set_admin(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.rowcount = 1
    repo.set_admin(4, True)
    assert mock_cursor.execute.call_args[0][1] == (True, 4)

    mock_cursor.rowcount = 0
    with pytest.raises(NotFound):
        repo.set_admin(5, True)


def test_count_admins_wraps_errors(repo, mock_db):
    _, mock_cursor = mock_db
    mock_cursor.execute.side_effect = psycopg2.OperationalError("down")
    with pytest.raises(PersistenceError):
        repo.count_admins()
