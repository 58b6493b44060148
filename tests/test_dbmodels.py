"""
Tests for the movies table definition
"""

from sqlalchemy import Integer, Text

from movies_api.dbmodels import Movies


def test_title_is_unbounded_text():
    title = Movies.__table__.c.title

    assert isinstance(title.type, Text)
    assert title.type.length is None
    assert title.nullable is False


def test_counters_default_to_zero():
    for name in ("like_count", "dislike_count"):
        column = Movies.__table__.c[name]
        assert isinstance(column.type, Integer)
        assert column.nullable is False
        assert column.server_default.arg.text == "0"


def test_primary_key_constraint_name():
    assert Movies.__table__.primary_key.name == "movies_pkey"
    assert [c.name for c in Movies.__table__.primary_key.columns] == ["id"]
