# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Hierarchy queries over the concepts of an is-a CodeSystem.

Parent links are stored as `Coding_Property` rows whose `target` points at
the parent concept. Ancestors are found with a recursive CTE evaluated by
the database; nothing is traversed in Python.
"""
from sqlalchemy import and_

from .errors import InvalidFilterError
from .models import CodeSystem, CodeSystemProperty
from .schema import code_system_property, coding, coding_property
from .sql import SelectQuery

PARENT_PROPERTY = "http://hl7.org/fhir/concept-properties#parent"
CHILD_PROPERTY = "http://hl7.org/fhir/concept-properties#child"
ABSTRACT_PROPERTY = "http://hl7.org/fhir/concept-properties#notSelectable"

ANCESTORS_CTE = "cte_ancestors"


def get_parent_property(code_system: CodeSystem) -> CodeSystemProperty:
    """
    Returns the property that links a concept to its parent. Code systems
    with `hierarchyMeaning = is-a` but no declared parent property get an
    implicit one named after the hierarchy meaning.
    """
    if code_system.hierarchy_meaning != "is-a":
        raise InvalidFilterError(
            f"Invalid filter: CodeSystem {code_system.url} does not have an is-a hierarchy",
            url=code_system.url,
        )
    for prop in code_system.property:
        if prop.uri == PARENT_PROPERTY:
            return prop
    return CodeSystemProperty(code=code_system.hierarchy_meaning or "parent", uri=PARENT_PROPERTY, type="code")


def find_ancestor(base: SelectQuery, code_system: CodeSystem, ancestor_code: str) -> SelectQuery:
    """
    Builds a query returning `code` and `display` of `ancestor_code` if it can
    be reached from the concepts selected by `base` through zero or more
    parent links, and no rows otherwise.

    `base` must select the `id`, `code` and `display` columns of `Coding`.
    """
    parent = get_parent_property(code_system)
    ancestors = base.recursive(ANCESTORS_CTE)

    step = (
        SelectQuery(coding)
        .column("id")
        .column("code")
        .column("display")
        .where(coding.c.system == code_system.id)
    )
    edge = step.get_next_join_alias(coding_property)
    step.inner_join(edge, coding.c.id == edge.c.target)

    definition = step.get_next_join_alias(code_system_property)
    step.inner_join(
        definition,
        and_(edge.c.property == definition.c.id, definition.c.code == parent.code),
    )

    # The child end of the edge must already be in the result set
    reachable = step.get_next_join_alias(ancestors)
    step.inner_join(reachable, edge.c.coding == reachable.c.id)

    ancestors = ancestors.union(step.to_select())

    return (
        SelectQuery(ancestors)
        .column("code")
        .column("display")
        .where(ancestors.c.code == ancestor_code)
        .limit(1)
    )
