# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
import uuid
from enum import Enum
from typing import List, Protocol

from pydantic import BaseModel, Field
from rich.console import Console
from sqlalchemy import select
from sqlalchemy.engine import Engine

from .models import ResourceType, TerminologyResource, parse_resource
from .schema import terminology_resource

console = Console(stderr=True)


class Operator(str, Enum):
    EQUALS = "eq"


class Filter(BaseModel):
    code: str
    operator: Operator = Operator.EQUALS
    value: str


class SortRule(BaseModel):
    code: str
    descending: bool = False


class SearchRequest(BaseModel):
    """A search for terminology resources of one type."""
    resource_type: ResourceType
    filters: List[Filter] = Field(default_factory=list)
    sort_rules: List[SortRule] = Field(default_factory=list)


class ResourceSearcher(Protocol):
    """Anything that can answer a SearchRequest with materialized resources."""

    def search_resources(self, request: SearchRequest) -> List[TerminologyResource]:
        ...


class SqlResourceRepository:
    """
    Stores terminology resources in the `terminology_resource` table and
    searches them.

    Descending sorts place missing values first, so a resource without a
    version or date is treated as the current one. Rows that tie on every
    sort rule come back in insertion order.
    """

    SEARCHABLE_COLUMNS = ("id", "url", "version", "date")

    def __init__(self, engine: Engine):
        self.engine = engine

    def _column(self, code: str):
        if code not in self.SEARCHABLE_COLUMNS:
            raise ValueError(f"Unsupported search parameter '{code}'. "
                             f"Supported: {list(self.SEARCHABLE_COLUMNS)}")
        return terminology_resource.c[code]

    def search_resources(self, request: SearchRequest) -> List[TerminologyResource]:
        stmt = select(terminology_resource.c.content).where(
            terminology_resource.c.resource_type == request.resource_type
        )
        for search_filter in request.filters:
            if search_filter.operator != Operator.EQUALS:
                raise ValueError(f"Unsupported search operator '{search_filter.operator}'")
            stmt = stmt.where(self._column(search_filter.code) == search_filter.value)

        order_by = []
        for rule in request.sort_rules:
            column = self._column(rule.code)
            order_by.append(column.desc().nulls_first() if rule.descending else column.asc().nulls_last())
        order_by.append(terminology_resource.c.seq)
        stmt = stmt.order_by(*order_by)

        with self.engine.connect() as conn:
            rows = conn.execute(stmt).scalars().all()
        return [parse_resource(content) for content in rows]

    def add(self, resource: TerminologyResource) -> TerminologyResource:
        """Stores a resource, assigning an id when it has none."""
        if not resource.id:
            resource = resource.model_copy(update={"id": str(uuid.uuid4())})

        with self.engine.begin() as conn:
            conn.execute(terminology_resource.insert().values(
                id=resource.id,
                resource_type=resource.resource_type,
                url=resource.url,
                version=resource.version,
                date=resource.date,
                project_id=resource.meta.project,
                content=resource.model_dump_json(by_alias=True, exclude_none=True),
            ))
        console.log(f"Stored {resource.resource_type}/{resource.id} ({resource.url}|{resource.version})")
        return resource
