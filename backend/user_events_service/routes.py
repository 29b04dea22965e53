"""
Signup routes: join an event and list the events the caller has joined.
"""

import logging
from typing import Tuple

from flask import Blueprint, request, jsonify, Response

from backend.auth_service.utils import verify_token_from_request
from backend.database.pagination import Pagination, get_page_args
from backend.errors import PersistenceError, SignupRejected
from backend.request_logging import attach_request_logging
from backend.user_events_service.repository import UserEventRepository, VALID_FILTERS

user_events_bp = Blueprint("user_events", __name__)
attach_request_logging(user_events_bp, "UserEvents")

user_event_repo = UserEventRepository()


@user_events_bp.route("/events/<int:event_id>/signup", methods=["POST"])
def sign_up_for_event(event_id: int) -> Tuple[Response, int]:
    """
    Sign the authenticated user up for a published, upcoming event.

    Returns:
        200: Success message.
        409: Event missing, unpublished, already past, or already joined.
        500: Database error.
    """
    principal, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        user_event_repo.create_signup(principal.user_id, event_id)
    except (SignupRejected, PersistenceError) as e:
        return e.to_response()

    logging.info(f"[UserEvents] User {principal.user_id} signed up for event {event_id}")
    return jsonify({"message": "Successfully signed up for the event"}), 200


@user_events_bp.route("/user/events", methods=["GET"])
def get_user_events() -> Tuple[Response, int]:
    """
    List the events the caller signed up for.

    Query params:
    - filter: "" (all), "upcoming" or "past".
    - page, limit: same defaults and fallbacks as the event listing.

    Returns:
        200: { events, page, limit, total, pages }
        400: Unknown filter.
        500: Database error.
    """
    principal, err, code = verify_token_from_request()
    if err:
        return err, code

    time_filter = request.args.get("filter", "")
    if time_filter not in VALID_FILTERS:
        return jsonify({"error": "Invalid filter option"}), 400

    page, limit = get_page_args()
    pagination = Pagination(page, limit)

    try:
        events = user_event_repo.get_all(principal.user_id, time_filter, pagination.limit, pagination.offset)
        pagination.total = user_event_repo.get_total_count(principal.user_id, time_filter)
    except PersistenceError as e:
        return e.to_response()

    body = {"events": [ev.to_dict() for ev in events]}
    body.update(pagination.to_dict())
    return jsonify(body), 200
