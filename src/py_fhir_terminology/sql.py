# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from typing import List, Optional, Tuple

from sqlalchemy import CTE, ColumnElement, FromClause, Select, and_, select
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.selectable import NamedFromClause


class SelectQuery:
    """
    A mutable SELECT builder over SQLAlchemy Core.

    Every method extends the query in place and returns it, so several
    helpers can each add their own joins and conditions to the same query
    before it is rendered with `to_select`. Join aliases come from a
    counter private to the instance, so helpers never collide with each
    other's joins. A builder is owned by a single call chain and is not
    safe to share between threads.
    """

    def __init__(self, source: NamedFromClause):
        self.source = source
        self._columns: List[ColumnElement] = []
        self._joins: List[Tuple[FromClause, ColumnElement, bool]] = []
        self._conditions: List[ColumnElement] = []
        self._limit: Optional[int] = None
        self._alias_count = 0

    @property
    def table_name(self) -> str:
        return self.source.name

    def get_next_join_alias(self, table: NamedFromClause) -> NamedFromClause:
        """Returns `table` under an alias not yet used by this query."""
        self._alias_count += 1
        return table.alias(f"t{self._alias_count}")

    def column(self, name: str) -> "SelectQuery":
        self._columns.append(self.source.c[name])
        return self

    def where(self, condition: ColumnElement) -> "SelectQuery":
        self._conditions.append(condition)
        return self

    def inner_join(self, target: FromClause, on: ColumnElement) -> "SelectQuery":
        self._joins.append((target, on, False))
        return self

    def left_join(self, target: FromClause, on: ColumnElement) -> "SelectQuery":
        self._joins.append((target, on, True))
        return self

    def limit(self, count: int) -> "SelectQuery":
        self._limit = count
        return self

    def to_select(self) -> Select:
        from_clause = self.source
        for target, on, outer in self._joins:
            from_clause = from_clause.join(target, on, isouter=outer)

        stmt = select(*(self._columns or [self.source])).select_from(from_clause)
        if self._conditions:
            stmt = stmt.where(and_(*self._conditions))
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        return stmt

    def recursive(self, name: str) -> CTE:
        """Declares this query as the anchor of a recursive CTE called `name`."""
        return self.to_select().cte(name, recursive=True)

    def compile_sql(self, dialect: Optional[Dialect] = None) -> str:
        """Renders the query as SQL text with parameters inlined, for display only."""
        compiled = self.to_select().compile(dialect=dialect, compile_kwargs={"literal_binds": True})
        return str(compiled)
