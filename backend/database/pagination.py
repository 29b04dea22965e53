"""
Pagination helpers for list endpoints.
"""

from typing import Any, Dict, Tuple

from flask import request

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Keeps LIMIT and OFFSET inside PostgreSQL bigint range
MAX_PAGE_ARG = 2 ** 31 - 1


class Pagination:
    """
    Page/limit bookkeeping for a LIMIT/OFFSET query.

    Usage:
        pagination = Pagination(page=2, limit=10, total=35)
        pagination.offset   # 10
        pagination.pages    # 4
    """

    def __init__(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT, total: int = 0):
        self.page = page
        self.limit = limit
        self.total = max(0, total)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def pages(self) -> int:
        # ceil(total / limit) without going through floats
        return (self.total + self.limit - 1) // self.limit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
        }


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if 1 <= value <= MAX_PAGE_ARG else default


def get_page_args(page_param: str = "page", limit_param: str = "limit") -> Tuple[int, int]:
    """
    Read page and limit from the query string.

    Missing, non-integer, non-positive or oversized values fall back to the defaults
    (page=1, limit=10); they are never reported as errors.

    Returns:
        tuple: (page, limit)
    """
    page = _positive_int(request.args.get(page_param), DEFAULT_PAGE)
    limit = _positive_int(request.args.get(limit_param), DEFAULT_LIMIT)
    return page, limit
