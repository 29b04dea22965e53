"""
Events service routes: list, read, create, update and delete events.

Every route requires a bearer token. Drafts are only ever shown to
administrators, and only administrators may change the catalog.
"""

import logging
from typing import Tuple, Dict, Any

from flask import Blueprint, request, jsonify, Response

from backend.auth_service.utils import verify_token_from_request
from backend.database.pagination import Pagination, get_page_args
from backend.errors import NotFound, PersistenceError, ValidationError
from backend.events_service.models import (
    STATUS_DRAFT,
    STATUS_PUBLISHED,
    VALID_STATUSES,
    apply_patch,
)
from backend.events_service.repository import EventRepository
from backend.events_service.validation import (
    event_from_payload,
    parse_filter_date,
    patch_from_payload,
    validate_event,
)
from backend.request_logging import attach_request_logging

events_bp = Blueprint("events", __name__)
attach_request_logging(events_bp, "Events")

event_repo = EventRepository()


@events_bp.route("", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    List events with optional filters and pagination.

    Query params:
    - date_start, date_end (YYYY-MM-DD): inclusive day range.
    - status: admins may pass draft or published; everyone else only
      ever sees published events.
    - title: case-insensitive substring.
    - page, limit: default 1 and 10; invalid values fall back to defaults.

    Returns:
        200: { events, page, limit, total, pages }
        400: Bad date format, or unknown status (admins).
        403: Non-admin asked for a non-published status.
        500: Database error.
    """
    principal, err, code = verify_token_from_request()
    if err:
        return err, code

    status = request.args.get("status", "").lower()
    title = request.args.get("title", "").lower()

    try:
        date_start = date_end = None
        if request.args.get("date_start"):
            date_start = parse_filter_date(request.args["date_start"], "date_start")
        if request.args.get("date_end"):
            date_end = parse_filter_date(request.args["date_end"], "date_end", end_of_day=True)
    except ValidationError as e:
        return e.to_response()

    if principal.is_admin:
        if status and status not in VALID_STATUSES:
            return jsonify({"error": "Invalid status."}), 400
    else:
        if status and status != STATUS_PUBLISHED:
            return jsonify({"error": "Access denied"}), 403
        status = STATUS_PUBLISHED

    page, limit = get_page_args()
    pagination = Pagination(page, limit)

    try:
        events = event_repo.get_all(date_start, date_end, status, title, pagination.limit, pagination.offset)
        pagination.total = event_repo.get_total_count(status, title, date_start, date_end)
    except PersistenceError as e:
        return e.to_response()

    body = {"events": [ev.to_dict() for ev in events]}
    body.update(pagination.to_dict())
    return jsonify(body), 200


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    A draft requested by a non-admin gets exactly the same 404 as a
    missing event, so drafts do not leak.

    Returns:
        200: Event object.
        404: Event not found (or hidden draft).
        500: Database error.
    """
    principal, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        event = event_repo.get(event_id)
    except NotFound:
        return jsonify({"error": "Event not found"}), 404
    except PersistenceError as e:
        return e.to_response()

    if event.status == STATUS_DRAFT and not principal.is_admin:
        return jsonify({"error": "Event not found"}), 404

    return jsonify(event.to_dict()), 200


@events_bp.route("", methods=["POST"])
def create_event() -> Tuple[Response, int]:
    """
    Create an event (admin only).

    Validations:
    - title 3-100 chars, long_description at least 10, short_description at most 200.
    - date_and_time ISO-8601 and in the future.
    - organizer and location present, status draft or published.

    Returns:
        201: The created event.
        400: Validation error.
        401/403: Not authenticated / not an admin.
        500: Database error.
    """
    principal, err, code = verify_token_from_request(admin_only=True)
    if err:
        return err, code

    data: Dict[str, Any] = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request"}), 400

    try:
        event = event_from_payload(data)
        validate_event(event)
    except ValidationError as e:
        return e.to_response()

    try:
        event_repo.create(event)
    except PersistenceError as e:
        return e.to_response()

    logging.info(f"[Events] Event {event.id} created by {principal.user_id}")
    return jsonify(event.to_dict()), 201


@events_bp.route("/<int:event_id>", methods=["PATCH"])
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Partially update an event (admin only).

    Only the fields present in the body overwrite the stored event; the
    merged event is then validated as a whole. The future-date rule only
    applies when the patch changes date_and_time.

    Returns:
        200: The updated event.
        400: Validation error.
        404: Event not found.
        500: Database error.
    """
    principal, err, code = verify_token_from_request(admin_only=True)
    if err:
        return err, code

    data: Dict[str, Any] = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request"}), 400

    try:
        patch = patch_from_payload(data)
    except ValidationError as e:
        return e.to_response()

    try:
        current = event_repo.get(event_id)
    except NotFound:
        return jsonify({"error": "Event not found"}), 404
    except PersistenceError as e:
        return e.to_response()

    event = apply_patch(current, patch)

    try:
        validate_event(event, require_future=patch.date_and_time is not None)
    except ValidationError as e:
        return e.to_response()

    try:
        event_repo.update(event)
    except NotFound:
        return jsonify({"error": "Event not found"}), 404
    except PersistenceError as e:
        return e.to_response()

    logging.info(f"[Events] Event {event_id} updated by {principal.user_id}")
    return jsonify(event.to_dict()), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
def delete_event(event_id: int) -> Tuple[Response, int]:
    """
    Hard-delete an event (admin only).

    Returns:
        200: Success message.
        404: Event not found.
        500: Database error.
    """
    principal, err, code = verify_token_from_request(admin_only=True)
    if err:
        return err, code

    try:
        event_repo.delete(event_id)
    except NotFound:
        return jsonify({"error": "Event not found"}), 404
    except PersistenceError as e:
        return e.to_response()

    logging.info(f"[Events] Event {event_id} deleted by {principal.user_id}")
    return jsonify({"message": "Event deleted successfully"}), 200
