# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from sqlalchemy import and_

from .schema import code_system_property, coding_property
from .sql import SelectQuery


def add_property_filter(query: SelectQuery, property_code: str, value: str, is_equal: bool = False) -> SelectQuery:
    """
    Keeps only concepts that lack (default) or carry (`is_equal=True`) the
    property `property_code` with the given value.

    `query` must be over a table whose `id` is a `Coding` id. An unknown
    property code matches nothing rather than raising.
    """
    edge = query.get_next_join_alias(coding_property)
    query.left_join(
        edge,
        and_(query.source.c.id == edge.c.coding, edge.c.value == value),
    )

    definition = query.get_next_join_alias(code_system_property)
    query.left_join(
        definition,
        and_(edge.c.property == definition.c.id, definition.c.code == property_code),
    )

    query.where(definition.c.id.is_not(None) if is_equal else definition.c.id.is_(None))
    return query
