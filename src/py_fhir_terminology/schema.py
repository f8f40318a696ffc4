# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
"""
Table declarations for the terminology store.

The tables are owned and migrated elsewhere; they are declared here only so
queries can be composed against them with SQLAlchemy Core.
"""
from sqlalchemy import BigInteger, Column, Integer, MetaData, String, Table, Text

metadata = MetaData()

# Stored CodeSystem, ValueSet and ConceptMap resources, one row per version
terminology_resource = Table(
    "terminology_resource",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(64), nullable=False, unique=True),
    Column("resource_type", String(32), nullable=False, index=True),
    Column("url", Text, index=True),
    Column("version", Text),
    Column("date", Text),
    Column("project_id", String(64)),
    Column("content", Text, nullable=False),
)

# One row per concept; `system` is the id of the owning CodeSystem resource
coding = Table(
    "Coding",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True),
    Column("system", String(64), nullable=False, index=True),
    Column("code", Text, nullable=False),
    Column("display", Text),
)

# Properties declared by each CodeSystem
code_system_property = Table(
    "CodeSystem_Property",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True),
    Column("system", String(64), nullable=False),
    Column("code", Text, nullable=False),
    Column("type", Text, nullable=False),
    Column("uri", Text),
    Column("description", Text),
)

# Property values of a concept. When `target` is set the row is an edge to another concept.
coding_property = Table(
    "Coding_Property",
    metadata,
    Column("coding", BigInteger, nullable=False, index=True),
    Column("property", BigInteger, nullable=False),
    Column("target", BigInteger, index=True),
    Column("value", Text),
)
