"""
Schema creation and initial admin seeding.

Both steps are idempotent and run by the gateway before it starts serving:
- init_db() creates the users, events and user_events tables if missing.
- create_initial_admin() inserts the admin from ADMIN_USERNAME/ADMIN_PASSWORD
  when no administrator exists yet.
"""

import os
import logging

import psycopg2

from backend.database.db_connection import get_db
from backend.auth_service.models import User
from backend.auth_service.repository import UserRepository
from backend.auth_service.utils import hash_password

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        username VARCHAR(50) NOT NULL UNIQUE,
        password TEXT NOT NULL,
        is_admin BOOLEAN NOT NULL DEFAULT FALSE
    );

    CREATE TABLE IF NOT EXISTS events (
        id SERIAL PRIMARY KEY,
        title VARCHAR(100) NOT NULL,
        long_description TEXT NOT NULL,
        short_description VARCHAR(200) NOT NULL,
        date_and_time TIMESTAMPTZ NOT NULL,
        organizer TEXT NOT NULL,
        location TEXT NOT NULL,
        status VARCHAR(20) NOT NULL CHECK (status IN ('draft', 'published'))
    );

    CREATE TABLE IF NOT EXISTS user_events (
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        event_id INTEGER NOT NULL REFERENCES events(id) ON DELETE CASCADE,
        PRIMARY KEY (user_id, event_id)
    );

    CREATE INDEX IF NOT EXISTS idx_events_status_date ON events (status, date_and_time);
"""


def init_db() -> None:
    """Create all tables and indexes that do not exist yet."""
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
    logging.info("Database schema is up to date")


def create_initial_admin(user_repo: UserRepository = None) -> bool:
    """
    Seed the first administrator.

    Returns:
        bool: True if an admin was created, False if one already existed.

    Raises:
        RuntimeError: No admin exists and the credentials are not configured.
    """
    user_repo = user_repo or UserRepository()

    if user_repo.count_admins() > 0:
        logging.info("Admin user already exists")
        return False

    username = os.getenv("ADMIN_USERNAME")
    password = os.getenv("ADMIN_PASSWORD")
    if not username or not password:
        raise RuntimeError("Admin credentials not provided. Set ADMIN_USERNAME and ADMIN_PASSWORD in .env")

    user_repo.create(User(username=username, password=hash_password(password), is_admin=True))
    logging.info("Admin user created successfully")
    return True


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    try:
        init_db()
        create_initial_admin()
    except psycopg2.Error as e:
        logging.error(f"Database initialization failed: {e}")
        raise SystemExit(1)
