# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
import json
import sys

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

# We wrap the settings import in a try-except block to provide a nicer
# error message if the environment holds invalid values.
try:
    from .config import settings
except Exception as e:
    console = Console()
    console.print(Panel(
        f"[bold red]Configuration Error:[/bold red]\n{e}\n\nPlease check your .env file and any [bold cyan]PYFHIRTERMINOLOGY_*[/bold cyan] environment variables.",
        title="[bold red]Initialization Failed[/bold red]",
        border_style="red"
    ))
    sys.exit(1)

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from .errors import TerminologyError
from .hierarchy import find_ancestor, get_parent_property
from .subsumption import TerminologyService, concept_query


app = typer.Typer(
    name="py-fhir-terminology",
    help="Resolve FHIR terminology resources by canonical URL and query code system hierarchies."
)
console = Console()


def get_engine() -> Engine:
    return create_engine(settings.database_url, echo=settings.echo_sql)


def _report_error(error: TerminologyError):
    console.print(Panel(
        Syntax(json.dumps(error.to_operation_outcome(), indent=2), "json", theme="monokai"),
        title=f"[bold red]{error.message}[/bold red]",
        border_style="red"
    ))
    raise typer.Exit(code=1)


@app.command(name="resolve", help="Print the current resource stored for a canonical URL.")
def resolve(
    resource_type: str = typer.Option(
        "CodeSystem",
        "--type",
        "-t",
        help="Resource type: CodeSystem, ValueSet or ConceptMap."
    ),
    url: str = typer.Option(..., "--url", "-u", help="Canonical URL of the resource."),
):
    if resource_type not in ("CodeSystem", "ValueSet", "ConceptMap"):
        console.print(f"[bold red]Unsupported resource type '{resource_type}'.[/bold red]")
        raise typer.Exit(code=2)

    service = TerminologyService(get_engine())
    try:
        resource = service.resolve(resource_type, url)
    except TerminologyError as e:
        _report_error(e)
    console.print_json(resource.model_dump_json(by_alias=True, exclude_none=True))


@app.command(name="parent-property", help="Print the property linking concepts to their parents.")
def parent_property(
    url: str = typer.Option(..., "--url", "-u", help="Canonical URL of the CodeSystem."),
):
    service = TerminologyService(get_engine())
    try:
        prop = get_parent_property(service.code_system(url))
    except TerminologyError as e:
        _report_error(e)
    console.print_json(prop.model_dump_json(exclude_none=True))


@app.command(name="ancestor-sql", help="Print the recursive SQL that tests whether ANCESTOR is an ancestor of CODE.")
def ancestor_sql(
    url: str = typer.Option(..., "--url", "-u", help="Canonical URL of the CodeSystem."),
    code: str = typer.Option(..., "--code", "-c", help="Code the traversal starts from."),
    ancestor: str = typer.Option(..., "--ancestor", "-a", help="Code to look for among the ancestors."),
):
    """
    Builds the ancestor query without executing it, rendered for the
    configured database's dialect.
    """
    engine = get_engine()
    service = TerminologyService(engine)
    try:
        code_system = service.code_system(url)
        query = find_ancestor(concept_query(code_system, code), code_system, ancestor)
    except TerminologyError as e:
        _report_error(e)

    console.print(Panel.fit(
        Syntax(query.compile_sql(engine.dialect), "sql", theme="monokai", line_numbers=True),
        title=f"[bold yellow]Is {ancestor} an ancestor of {code}?[/bold yellow]",
        border_style="yellow",
        padding=(1, 2)
    ))


@app.command(name="subsumes", help="Test the subsumption relationship between two codes.")
def subsumes(
    url: str = typer.Option(..., "--url", "-u", help="Canonical URL of the CodeSystem."),
    code_a: str = typer.Option(..., "--code-a", help="The potentially subsuming code."),
    code_b: str = typer.Option(..., "--code-b", help="The potentially subsumed code."),
):
    service = TerminologyService(get_engine())
    try:
        outcome = service.subsumes(url, code_a, code_b)
    except TerminologyError as e:
        _report_error(e)
    console.print(f"[bold green]{outcome.value}[/bold green]")


if __name__ == "__main__":
    app()
