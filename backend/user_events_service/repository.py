"""
Data access for signups (the user_events association table).
"""

import logging
from typing import List

import psycopg2
import psycopg2.errors

from backend.database.db_connection import get_db
from backend.database.query_builder import FilterQuery
from backend.errors import PersistenceError, SignupRejected
from backend.events_service.models import Event, STATUS_PUBLISHED

FILTER_UPCOMING = "upcoming"
FILTER_PAST = "past"
VALID_FILTERS = ["", FILTER_UPCOMING, FILTER_PAST]

SIGNUP_EVENT_COLUMNS = (
    "e.id, e.title, e.long_description, e.short_description, "
    "e.date_and_time, e.organizer, e.location, e.status"
)


def build_signup_filters(user_id: int, time_filter: str = "") -> FilterQuery:
    q = FilterQuery().where("ue.user_id = %s", user_id)
    if time_filter == FILTER_UPCOMING:
        q.where("e.date_and_time > NOW()")
    elif time_filter == FILTER_PAST:
        q.where("e.date_and_time <= NOW()")
    elif time_filter:
        raise ValueError(f"Unknown signup filter: {time_filter}")
    return q


class UserEventRepository:

    def create_signup(self, user_id: int, event_id: int) -> None:
        """
        Sign a user up for an event.

        Eligibility (event exists, is published, starts after NOW() and the
        user is not already signed up) is checked by the same INSERT that
        records the signup, so there is no window between check and write.
        The (user_id, event_id) primary key catches concurrent duplicates.

        Raises:
            SignupRejected: The event is not eligible or the user already joined.
            PersistenceError: Any other database failure.
        """
        sql = """
            INSERT INTO user_events (user_id, event_id)
            SELECT %s, e.id
            FROM events e
            WHERE e.id = %s
              AND e.status = %s
              AND e.date_and_time > NOW()
              AND NOT EXISTS (
                  SELECT 1 FROM user_events ue
                  WHERE ue.user_id = %s AND ue.event_id = e.id
              );
        """
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (user_id, event_id, STATUS_PUBLISHED, user_id))
                    affected = cur.rowcount
        except psycopg2.errors.UniqueViolation as e:
            raise SignupRejected("Already signed up for this event") from e
        except psycopg2.Error as e:
            logging.error(f"Database error signing user {user_id} up for event {event_id}: {e}")
            raise PersistenceError("Failed to sign up for event") from e

        if affected == 0:
            raise SignupRejected(
                "Can't sign up to event: it does not exist, is not published, "
                "has already taken place, or you are already signed up"
            )

    def get_all(self, user_id: int, time_filter: str = "", limit: int = 10, offset: int = 0) -> List[Event]:
        q = build_signup_filters(user_id, time_filter)
        sql = f"""
            SELECT {SIGNUP_EVENT_COLUMNS}
            FROM events e
            JOIN user_events ue ON e.id = ue.event_id
            {q.where_clause()}
            ORDER BY e.id
            LIMIT %s OFFSET %s;
        """
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, q.params + [limit, offset])
                    rows = cur.fetchall()
        except psycopg2.Error as e:
            logging.error(f"Database error listing events for user {user_id}: {e}")
            raise PersistenceError("Failed to get events") from e

        return [Event.from_row(row) for row in rows]

    def get_total_count(self, user_id: int, time_filter: str = "") -> int:
        q = build_signup_filters(user_id, time_filter)
        sql = f"""
            SELECT COUNT(*) AS total
            FROM events e
            JOIN user_events ue ON e.id = ue.event_id
            {q.where_clause()};
        """
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, q.params)
                    row = cur.fetchone()
        except psycopg2.Error as e:
            logging.error(f"Database error counting events for user {user_id}: {e}")
            raise PersistenceError("Failed to get total count") from e

        return row["total"]
