"""
Per-blueprint request/response logging.
"""

import logging

from flask import Blueprint, request, Response


def attach_request_logging(bp: Blueprint, tag: str) -> None:
    """
    Log every incoming request and its response status under a service tag.

    Headers are not logged: they carry bearer tokens.
    """

    @bp.before_request
    def before_request() -> None:
        logging.info(f"[{tag}] Incoming {request.method} {request.path}")

    @bp.after_request
    def after_request(response: Response) -> Response:
        logging.info(f"[{tag}] Response {response.status}")
        return response
