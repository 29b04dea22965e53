"""
Data access for the events table.
"""

import logging
from datetime import datetime
from typing import List, Optional

import psycopg2

from backend.database.db_connection import get_db
from backend.database.query_builder import FilterQuery, like_pattern
from backend.errors import NotFound, PersistenceError
from backend.events_service.models import Event

EVENT_COLUMNS = "id, title, long_description, short_description, date_and_time, organizer, location, status"


def build_event_filters(
    status: str = "",
    title: str = "",
    date_start: Optional[datetime] = None,
    date_end: Optional[datetime] = None,
) -> FilterQuery:
    """Optional, conjunctive filters shared by the listing and count queries."""
    q = FilterQuery()
    if status:
        q.where("status = %s", status)
    if title:
        q.where("title LIKE %s", like_pattern(title.lower()))
    if date_start:
        q.where("date_and_time >= %s", date_start)
    if date_end:
        q.where("date_and_time <= %s", date_end)
    return q


class EventRepository:

    def create(self, event: Event) -> int:
        """Insert a normalized copy of the event and set its new id."""
        ev = event.normalized()
        sql = """
            INSERT INTO events (title, long_description, short_description, date_and_time, organizer, location, status)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id;
        """
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (
                        ev.title, ev.long_description, ev.short_description,
                        ev.date_and_time, ev.organizer, ev.location, ev.status,
                    ))
                    row = cur.fetchone()
        except psycopg2.Error as e:
            logging.error(f"Database error creating event: {e}")
            raise PersistenceError("Failed to create event") from e

        event.id = row["id"]
        event.title, event.organizer, event.location = ev.title, ev.organizer, ev.location
        return event.id

    def get(self, event_id: int) -> Event:
        sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE id = %s;"
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (event_id,))
                    row = cur.fetchone()
        except psycopg2.Error as e:
            logging.error(f"Database error getting event {event_id}: {e}")
            raise PersistenceError("Failed to get event") from e

        if not row:
            raise NotFound("Event not found")
        return Event.from_row(row)

    def update(self, event: Event) -> None:
        """Write every field of the event. Last writer wins."""
        ev = event.normalized()
        sql = """
            UPDATE events
            SET title = %s, long_description = %s, short_description = %s,
                date_and_time = %s, organizer = %s, location = %s, status = %s
            WHERE id = %s;
        """
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (
                        ev.title, ev.long_description, ev.short_description,
                        ev.date_and_time, ev.organizer, ev.location, ev.status,
                        ev.id,
                    ))
                    affected = cur.rowcount
        except psycopg2.Error as e:
            logging.error(f"Database error updating event {event.id}: {e}")
            raise PersistenceError("Failed to update event") from e

        if affected == 0:
            raise NotFound("Event not found")
        event.title, event.organizer, event.location = ev.title, ev.organizer, ev.location

    def delete(self, event_id: int) -> None:
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM events WHERE id = %s;", (event_id,))
                    affected = cur.rowcount
        except psycopg2.Error as e:
            logging.error(f"Database error deleting event {event_id}: {e}")
            raise PersistenceError("Failed to delete event") from e

        if affected == 0:
            raise NotFound("Event not found")

    def get_all(
        self,
        date_start: Optional[datetime] = None,
        date_end: Optional[datetime] = None,
        status: str = "",
        title: str = "",
        limit: int = 10,
        offset: int = 0,
    ) -> List[Event]:
        q = build_event_filters(status, title, date_start, date_end)
        sql = f"SELECT {EVENT_COLUMNS} FROM events {q.where_clause()} ORDER BY id LIMIT %s OFFSET %s;"
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, q.params + [limit, offset])
                    rows = cur.fetchall()
        except psycopg2.Error as e:
            logging.error(f"Database error listing events: {e}")
            raise PersistenceError("Failed to get events") from e

        return [Event.from_row(row) for row in rows]

    def get_total_count(
        self,
        status: str = "",
        title: str = "",
        date_start: Optional[datetime] = None,
        date_end: Optional[datetime] = None,
    ) -> int:
        q = build_event_filters(status, title, date_start, date_end)
        sql = f"SELECT COUNT(*) AS total FROM events {q.where_clause()};"
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, q.params)
                    row = cur.fetchone()
        except psycopg2.Error as e:
            logging.error(f"Database error counting events: {e}")
            raise PersistenceError("Failed to get total count") from e

        return row["total"]
