"""
Data access for the users table.
"""

import logging

import psycopg2
import psycopg2.errors

from backend.database.db_connection import get_db
from backend.errors import NotFound, PersistenceError, ValidationError
from backend.auth_service.models import User


class UserRepository:

    def create(self, user: User) -> int:
        """Insert a user whose password is already hashed; sets and returns the new id."""
        sql = """
            INSERT INTO users (username, password, is_admin)
            VALUES (%s, %s, %s)
            RETURNING id;
        """
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (user.username, user.password, user.is_admin))
                    row = cur.fetchone()
        except psycopg2.errors.UniqueViolation as e:
            raise ValidationError("Username already exists") from e
        except psycopg2.Error as e:
            logging.error(f"Database error creating user: {e}")
            raise PersistenceError("Failed to register user") from e

        user.id = row["id"]
        return user.id

    def get_by_username(self, username: str) -> User:
        sql = "SELECT id, username, password, is_admin FROM users WHERE username = %s;"
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (username,))
                    row = cur.fetchone()
        except psycopg2.Error as e:
            logging.error(f"Database error getting user: {e}")
            raise PersistenceError("Failed to get user") from e

        if not row:
            raise NotFound("User not found")
        return User.from_row(row)

    def set_admin(self, user_id: int, is_admin: bool = True) -> None:
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute("UPDATE users SET is_admin = %s WHERE id = %s;", (is_admin, user_id))
                    affected = cur.rowcount
        except psycopg2.Error as e:
            logging.error(f"Database error updating user {user_id}: {e}")
            raise PersistenceError("Failed to update user") from e

        if affected == 0:
            raise NotFound("User not found")

    def count_admins(self) -> int:
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT COUNT(*) AS total FROM users WHERE is_admin = TRUE;")
                    row = cur.fetchone()
        except psycopg2.Error as e:
            logging.error(f"Database error counting admins: {e}")
            raise PersistenceError("Failed to count admins") from e

        return row["total"]
