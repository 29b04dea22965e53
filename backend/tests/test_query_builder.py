import pytest

from backend.database.query_builder import FilterQuery, like_pattern


def test_empty_query_has_no_where_clause():
    q = FilterQuery()
    assert q.where_clause() == ""
    assert q.params == []
    assert len(q) == 0


def test_predicates_keep_their_order():
    q = FilterQuery()
    q.where("status = %s", "published").where("title LIKE %s", "%a%").where("date_and_time <= %s", "2030-01-01")

    assert q.where_clause() == "WHERE status = %s AND title LIKE %s AND date_and_time <= %s"
    assert q.params == ["published", "%a%", "2030-01-01"]


def test_predicate_without_arguments():
    q = FilterQuery().where("ue.user_id = %s", 7).where("e.date_and_time > NOW()")
    assert q.where_clause() == "WHERE ue.user_id = %s AND e.date_and_time > NOW()"
    assert q.params == [7]


def test_placeholder_mismatch_is_rejected():
    with pytest.raises(ValueError):
        FilterQuery().where("status = %s")


def test_like_pattern_escapes_wildcards():
    assert like_pattern("party") == "%party%"
    assert like_pattern("100%_off") == "%100\\%\\_off%"
