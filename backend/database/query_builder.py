"""
Small helper for composing optional WHERE predicates.

Each predicate is stored together with its arguments, so the order of the
%s placeholders in the rendered SQL always matches the order of the params.
"""

from typing import Any, List, Tuple


class FilterQuery:
    """
    Ordered list of (predicate, args) pairs joined with AND.

    Usage:
        q = FilterQuery()
        q.where("status = %s", "published")
        q.where("date_and_time >= %s", start)
        sql = f"SELECT * FROM events {q.where_clause()}"
        cur.execute(sql, q.params)
    """

    def __init__(self):
        self._predicates: List[Tuple[str, Tuple[Any, ...]]] = []

    def where(self, clause: str, *args: Any) -> "FilterQuery":
        if clause.count("%s") != len(args):
            raise ValueError(f"Placeholder count does not match arguments for: {clause}")
        self._predicates.append((clause, args))
        return self

    def where_clause(self) -> str:
        if not self._predicates:
            return ""
        return "WHERE " + " AND ".join(clause for clause, _ in self._predicates)

    @property
    def params(self) -> List[Any]:
        return [arg for _, args in self._predicates for arg in args]

    def __len__(self) -> int:
        return len(self._predicates)


def like_pattern(value: str) -> str:
    """Escape LIKE wildcards in user input and wrap it for a substring match."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
