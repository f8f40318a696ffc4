import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from py_fhir_terminology.hierarchy import PARENT_PROPERTY
from py_fhir_terminology.models import CodeSystem
from py_fhir_terminology.schema import code_system_property, coding, coding_property, metadata
from py_fhir_terminology.search import SqlResourceRepository

SYSTEM_URL = "http://example.org/fhir/CodeSystem/body-site"
DECLARED_SYSTEM_URL = "http://example.org/fhir/CodeSystem/with-parent"

# Concept ids
A, B, C, D = 1, 2, 3, 4
X, Y = 5, 6

# CodeSystem_Property ids
IS_A, STATUS, NOT_SELECTABLE, PARENT = 1, 2, 3, 4


def _seed_hierarchy(engine: Engine):
    """
    Two code systems:
      cs-1 (implicit parent property "is-a"): A -> B -> C, plus an unrelated D
      cs-2 (declared parent property "parent"): X -> Y
    A is "retired"; D is not selectable.
    """
    metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(insert(code_system_property), [
            {"id": IS_A, "system": "cs-1", "code": "is-a", "type": "code", "uri": PARENT_PROPERTY},
            {"id": STATUS, "system": "cs-1", "code": "status", "type": "code", "uri": None},
            {"id": NOT_SELECTABLE, "system": "cs-1", "code": "notSelectable", "type": "boolean", "uri": None},
            {"id": PARENT, "system": "cs-2", "code": "parent", "type": "code", "uri": PARENT_PROPERTY},
        ])
        conn.execute(insert(coding), [
            {"id": A, "system": "cs-1", "code": "A", "display": "Concept A"},
            {"id": B, "system": "cs-1", "code": "B", "display": "Concept B"},
            {"id": C, "system": "cs-1", "code": "C", "display": "Concept C"},
            {"id": D, "system": "cs-1", "code": "D", "display": "Concept D"},
            {"id": X, "system": "cs-2", "code": "X", "display": "Concept X"},
            {"id": Y, "system": "cs-2", "code": "Y", "display": "Concept Y"},
        ])
        conn.execute(insert(coding_property), [
            {"coding": A, "property": IS_A, "target": B, "value": "B"},
            {"coding": B, "property": IS_A, "target": C, "value": "C"},
            {"coding": A, "property": STATUS, "target": None, "value": "retired"},
            {"coding": D, "property": NOT_SELECTABLE, "target": None, "value": "true"},
            {"coding": X, "property": PARENT, "target": Y, "value": "Y"},
        ])


@pytest.fixture
def engine() -> Engine:
    """An in-memory SQLite database holding the sample hierarchies. Fresh per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _seed_hierarchy(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def conn(engine: Engine):
    with engine.connect() as connection:
        yield connection


@pytest.fixture
def repository(engine: Engine) -> SqlResourceRepository:
    return SqlResourceRepository(engine)


@pytest.fixture
def code_system() -> CodeSystem:
    """The is-a code system without a declared parent property."""
    return CodeSystem(id="cs-1", url=SYSTEM_URL, hierarchy_meaning="is-a")


@pytest.fixture
def declared_code_system() -> CodeSystem:
    """The is-a code system that declares its parent property explicitly."""
    return CodeSystem.model_validate({
        "resourceType": "CodeSystem",
        "id": "cs-2",
        "url": DECLARED_SYSTEM_URL,
        "hierarchyMeaning": "is-a",
        "property": [
            {"code": "status", "type": "code"},
            {"code": "parent", "uri": PARENT_PROPERTY, "type": "code"},
        ],
    })


@pytest.fixture
def database_file(tmp_path) -> str:
    """
    Provides the URL of an on-disk SQLite database with the sample
    hierarchies and both code systems stored, for the CLI.
    """
    url = f"sqlite:///{tmp_path / 'terminology.db'}"
    file_engine = create_engine(url)
    _seed_hierarchy(file_engine)
    repository = SqlResourceRepository(file_engine)
    repository.add(CodeSystem(id="cs-1", url=SYSTEM_URL, hierarchy_meaning="is-a"))
    repository.add(CodeSystem(id="cs-flat", url="http://example.org/fhir/CodeSystem/flat", hierarchy_meaning="grouped-by"))
    file_engine.dispose()
    return url
