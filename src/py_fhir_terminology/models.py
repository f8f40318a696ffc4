# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Literal, Optional, Union

ResourceType = Literal["CodeSystem", "ValueSet", "ConceptMap"]

HierarchyMeaning = Literal["grouped-by", "is-a", "part-of", "classified-with"]

# FHIR JSON is camelCase; unknown elements are ignored because only a few are read here.
_FHIR_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Meta(BaseModel):
    """Resource metadata. `project` marks the tenant the resource was stored in."""
    model_config = _FHIR_CONFIG

    project: Optional[str] = None
    version_id: Optional[str] = None
    last_updated: Optional[str] = None


# Stored resources may carry "meta": null; it reads as empty metadata.
MetaElement = Annotated[Meta, BeforeValidator(lambda value: Meta() if value is None else value)]


class CodeSystemProperty(BaseModel):
    """
    A property declared by a CodeSystem. Concept property rows in the
    database reference these by `code`.
    """
    model_config = _FHIR_CONFIG

    code: str
    uri: Optional[str] = None
    type: str
    description: Optional[str] = None


class CodeSystem(BaseModel):
    """
    A terminology resource defining a set of codes. It is the only kind
    that carries hierarchy information.
    """
    model_config = _FHIR_CONFIG

    resource_type: Literal["CodeSystem"] = "CodeSystem"
    id: Optional[str] = None
    url: Optional[str] = None
    version: Optional[str] = None
    date: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    meta: MetaElement = Field(default_factory=Meta)
    hierarchy_meaning: Optional[HierarchyMeaning] = None
    property: List[CodeSystemProperty] = Field(default_factory=list)


class ValueSet(BaseModel):
    model_config = _FHIR_CONFIG

    resource_type: Literal["ValueSet"] = "ValueSet"
    id: Optional[str] = None
    url: Optional[str] = None
    version: Optional[str] = None
    date: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    meta: MetaElement = Field(default_factory=Meta)


class ConceptMap(BaseModel):
    model_config = _FHIR_CONFIG

    resource_type: Literal["ConceptMap"] = "ConceptMap"
    id: Optional[str] = None
    url: Optional[str] = None
    version: Optional[str] = None
    date: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    meta: MetaElement = Field(default_factory=Meta)


TerminologyResource = Annotated[
    Union[CodeSystem, ValueSet, ConceptMap],
    Field(discriminator="resource_type"),
]

terminology_resource_adapter = TypeAdapter(TerminologyResource)


def parse_resource(content: Union[str, bytes, dict]) -> TerminologyResource:
    """Parses FHIR JSON (text or an already decoded dict) into the matching model."""
    if isinstance(content, dict):
        return terminology_resource_adapter.validate_python(content)
    return terminology_resource_adapter.validate_json(content)
