# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from rich.console import Console

from .config import settings
from .errors import NotFoundError
from .models import ResourceType, TerminologyResource
from .search import Filter, Operator, ResourceSearcher, SearchRequest, SortRule

console = Console(stderr=True)


def find_terminology_resource(
    searcher: ResourceSearcher,
    resource_type: ResourceType,
    url: str,
) -> TerminologyResource:
    """
    Resolves a canonical URL to the single current resource of the given type.

    Candidates come back from the search ordered by version, then date, both
    descending and lexical; a missing version or date counts as current.
    When that still leaves several candidates, copies stored in the base
    FHIR project are moved behind every other candidate.
    """
    if not url:
        raise ValueError("A canonical URL is required to resolve a terminology resource.")

    resources = searcher.search_resources(SearchRequest(
        resource_type=resource_type,
        filters=[Filter(code="url", operator=Operator.EQUALS, value=url)],
        sort_rules=[
            SortRule(code="version", descending=True),
            SortRule(code="date", descending=True),
        ],
    ))

    if not resources:
        raise NotFoundError(resource_type, url)
    if len(resources) > 1:
        console.log(f"Found {len(resources)} candidates for {resource_type} {url}; breaking ties by project.")
        # sorted() is stable, so candidates within each group keep the search order
        resources = sorted(resources, key=lambda r: r.meta.project == settings.base_project_id)

    resource = resources[0]
    console.log(f"Resolved {resource_type} {url} to id={resource.id} version={resource.version}")
    return resource
