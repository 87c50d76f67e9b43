"""Read-only commands for looking at a spec before converting it.

* ``endpoints`` lists every page that ``convert`` would produce.
* ``example`` prints the example payload synthesised for one definition.
"""

from __future__ import annotations

import typer

from swagfluence.example import ExampleSynthesizer
from swagfluence.exceptions import SwagfluenceError
from swagfluence.models import Schema, Spec
from swagfluence.output import error, get_output
from swagfluence.parser import Resolver, extract_endpoints, load_and_parse
from swagfluence.parser.resolver import COMPONENTS_PREFIX, DEFINITIONS_PREFIX


def endpoints_command(
    source: str = typer.Argument(
        ..., help="Spec URL, file path, or '-' for stdin."
    ),
) -> None:
    """List the endpoints of a spec with the page title each one gets.

    Example::

        swagfluence endpoints ./openapi.yaml
        swagfluence --json endpoints ./openapi.yaml
    """
    try:
        spec = load_and_parse(source)
    except SwagfluenceError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows = [
        [ep.method.value.upper(), ep.path, ep.title]
        for ep in extract_endpoints(spec)
    ]
    get_output().print_table(
        ["Method", "Path", "Title"],
        rows,
        title=f"{spec.info.title} -- Endpoints ({len(rows)})",
    )


def example_command(
    source: str = typer.Argument(
        ..., help="Spec URL, file path, or '-' for stdin."
    ),
    name: str = typer.Argument(
        ..., help="Definition name, e.g. 'Pet' or 'User'."
    ),
) -> None:
    """Print the example JSON generated for a named definition.

    Example::

        swagfluence example ./petstore.json Pet
    """
    try:
        spec = load_and_parse(source)
        schema = Schema(ref=definition_ref(spec, name))
        # Surface a missing definition instead of printing its placeholder.
        Resolver(spec).lookup(schema.ref)
    except SwagfluenceError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    synthesizer = ExampleSynthesizer(Resolver(spec))
    get_output().format_json(synthesizer.synthesize(schema))


def definition_ref(spec: Spec, name: str) -> str:
    """Build the ``$ref`` string for *name* in whichever table the spec uses."""
    escaped = name.replace("~", "~0").replace("/", "~1")
    if spec.components is not None and name in spec.components.schemas:
        return COMPONENTS_PREFIX + escaped
    if name in spec.definitions or spec.swagger:
        return DEFINITIONS_PREFIX + escaped
    return COMPONENTS_PREFIX + escaped
