from sqlalchemy import and_

from py_fhir_terminology.schema import code_system_property, coding, coding_property
from py_fhir_terminology.sql import SelectQuery


def test_table_name_reflects_source():
    assert SelectQuery(coding).table_name == "Coding"


def test_join_aliases_are_unique_per_query():
    query = SelectQuery(coding)
    first = query.get_next_join_alias(coding_property)
    second = query.get_next_join_alias(coding_property)

    assert first.name == "t1"
    assert second.name == "t2"
    # Each query counts on its own
    assert SelectQuery(coding).get_next_join_alias(coding_property).name == "t1"


def test_selects_whole_source_without_columns(conn):
    rows = conn.execute(SelectQuery(coding).where(coding.c.code == "A").to_select()).all()

    assert len(rows) == 1
    assert rows[0].display == "Concept A"
    assert rows[0].system == "cs-1"


def test_conditions_are_combined_and_limited(conn):
    query = (
        SelectQuery(coding)
        .column("code")
        .where(coding.c.system == "cs-1")
        .where(coding.c.code != "A")
        .limit(2)
    )

    codes = conn.execute(query.to_select()).scalars().all()

    assert len(codes) == 2
    assert "A" not in codes


def test_inner_join_through_aliases(conn):
    query = SelectQuery(coding).column("code")
    edge = query.get_next_join_alias(coding_property)
    query.inner_join(edge, coding.c.id == edge.c.coding)
    definition = query.get_next_join_alias(code_system_property)
    query.inner_join(definition, and_(edge.c.property == definition.c.id, definition.c.code == "is-a"))

    codes = conn.execute(query.to_select()).scalars().all()

    assert sorted(codes) == ["A", "B"]


def test_compile_sql_inlines_parameters():
    sql = SelectQuery(coding).column("code").where(coding.c.code == "A").limit(1).compile_sql()

    assert 'FROM "Coding"' in sql
    assert "'A'" in sql
    assert "LIMIT 1" in sql
