# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from enum import Enum
from typing import Optional

from rich.console import Console
from sqlalchemy.engine import Connection, Engine

from .hierarchy import find_ancestor, get_parent_property
from .models import CodeSystem, ResourceType, TerminologyResource
from .resolver import find_terminology_resource
from .schema import coding
from .search import ResourceSearcher, SqlResourceRepository
from .sql import SelectQuery

console = Console(stderr=True)


class SubsumptionOutcome(str, Enum):
    """Outcome codes of the FHIR $subsumes operation."""
    EQUIVALENT = "equivalent"
    SUBSUMES = "subsumes"
    SUBSUMED_BY = "subsumed-by"
    NOT_SUBSUMED = "not-subsumed"


def concept_query(code_system: CodeSystem, code: str) -> SelectQuery:
    """Selects the single concept `code` of `code_system`, shaped as an ancestor seed."""
    return (
        SelectQuery(coding)
        .column("id")
        .column("code")
        .column("display")
        .where(coding.c.system == code_system.id)
        .where(coding.c.code == code)
    )


def is_ancestor(conn: Connection, code_system: CodeSystem, code: str, ancestor_code: str) -> bool:
    """True if `ancestor_code` is `code` itself or one of its ancestors."""
    query = find_ancestor(concept_query(code_system, code), code_system, ancestor_code)
    return conn.execute(query.to_select()).first() is not None


def subsumes(conn: Connection, code_system: CodeSystem, code_a: str, code_b: str) -> SubsumptionOutcome:
    """Tests the subsumption relationship between two codes of an is-a CodeSystem."""
    # Checked up front so equal codes on a flat code system still fail
    get_parent_property(code_system)

    if code_a == code_b:
        return SubsumptionOutcome.EQUIVALENT
    if is_ancestor(conn, code_system, code_b, code_a):
        return SubsumptionOutcome.SUBSUMES
    if is_ancestor(conn, code_system, code_a, code_b):
        return SubsumptionOutcome.SUBSUMED_BY
    return SubsumptionOutcome.NOT_SUBSUMED


class TerminologyService:
    """
    Resolves code systems by URL and answers hierarchy questions against
    a single database.
    """

    def __init__(self, engine: Engine, searcher: Optional[ResourceSearcher] = None):
        self.engine = engine
        self.searcher = searcher or SqlResourceRepository(engine)

    def resolve(self, resource_type: ResourceType, url: str) -> TerminologyResource:
        return find_terminology_resource(self.searcher, resource_type, url)

    def code_system(self, url: str) -> CodeSystem:
        return self.resolve("CodeSystem", url)

    def is_ancestor(self, system_url: str, code: str, ancestor_code: str) -> bool:
        code_system = self.code_system(system_url)
        with self.engine.connect() as conn:
            return is_ancestor(conn, code_system, code, ancestor_code)

    def subsumes(self, system_url: str, code_a: str, code_b: str) -> SubsumptionOutcome:
        code_system = self.code_system(system_url)
        with self.engine.connect() as conn:
            outcome = subsumes(conn, code_system, code_a, code_b)
        console.log(f"{system_url}: {code_a} {outcome.value} {code_b}")
        return outcome
