"""The ``convert`` command -- publish one page per endpoint.

Pages go to Confluence when the connection settings are complete (see
:func:`~swagfluence.config.load_confluence_config`), and to stdout otherwise
or when ``--dry-run`` is given.
"""

from __future__ import annotations

from typing import Optional

import typer

from swagfluence.config import load_confluence_config
from swagfluence.confluence import ConfluenceClient, ConsolePublisher
from swagfluence.converter import Converter
from swagfluence.exceptions import SwagfluenceError
from swagfluence.output import error, info, suggest


def convert_command(
    ctx: typer.Context,
    source: str = typer.Argument(
        ..., help="Spec URL, file path, or '-' for stdin."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print pages to stdout instead of publishing."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Confluence base URL (overrides CONFLUENCE_BASE_URL)."
    ),
    space_key: Optional[str] = typer.Option(
        None, "--space-key", help="Confluence space key (overrides CONFLUENCE_SPACE_KEY)."
    ),
    parent_page_id: Optional[str] = typer.Option(
        None, "--parent-page-id", help="Existing page to nest the endpoint pages under."
    ),
) -> None:
    """Convert a Swagger/OpenAPI spec into Confluence pages.

    Example::

        swagfluence convert https://petstore.swagger.io/v2/swagger.json
        swagfluence convert ./openapi.yaml --dry-run > pages.xml
    """
    from swagfluence.app import cancel_event

    try:
        config = load_confluence_config(
            base_url=base_url, space_key=space_key, parent_page_id=parent_page_id
        )

        if dry_run or not config.enabled:
            if not dry_run:
                info("Confluence is not configured; printing pages to stdout.")
                suggest("Set CONFLUENCE_BASE_URL, CONFLUENCE_USERNAME, "
                        "CONFLUENCE_API_TOKEN and CONFLUENCE_SPACE_KEY to publish.")
            converter = Converter(ConsolePublisher(), config.parent_page_id, config.timeout)
            converter.convert(source, cancel_event)
            return

        with ConfluenceClient(config) as client:
            converter = Converter(client, config.parent_page_id, config.timeout)
            converter.convert(source, cancel_event)
    except SwagfluenceError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
