"""Orchestrate one conversion run: load, extract, render, publish.

:class:`Converter` drives the pipeline for a single spec:

1. Load and validate the document (unless a :class:`~swagfluence.models.Spec`
   is passed in directly).
2. Flatten it into endpoints.
3. Create the parent index page, or reuse a configured one.
4. Render and publish one page per endpoint, in document order.

Progress goes to stderr through :mod:`swagfluence.output`; the publisher
decides where the pages go. A :class:`threading.Event` may be passed to
stop the run between two endpoints.
"""

from __future__ import annotations

import threading
from typing import Optional, Union

from swagfluence.confluence import PageClient, PageFormatter
from swagfluence.exceptions import ConnectionError_, ConversionCancelled, PublishError
from swagfluence.models import ConversionSummary, Spec
from swagfluence.output import get_output
from swagfluence.parser import extract_endpoints, load_and_parse


class Converter:
    """Converts a Swagger/OpenAPI document into a tree of pages.

    Args:
        publisher: Where pages go (:class:`~swagfluence.confluence.ConfluenceClient`
            or :class:`~swagfluence.confluence.ConsolePublisher`).
        parent_page_id: Existing page to use as parent. When empty, an index
            page named after the API is created first.
        timeout: Timeout in seconds for fetching a spec from a URL.
    """

    def __init__(
        self,
        publisher: PageClient,
        parent_page_id: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._publisher = publisher
        self._parent_page_id = parent_page_id
        self._timeout = timeout

    def convert(
        self,
        source: Union[str, Spec],
        cancel_event: Optional[threading.Event] = None,
    ) -> ConversionSummary:
        """Run the conversion.

        Args:
            source: A URL, file path, ``-`` for stdin, or an already loaded
                :class:`~swagfluence.models.Spec`.
            cancel_event: Checked before each endpoint; when set the run
                stops with :class:`~swagfluence.exceptions.ConversionCancelled`.

        Returns:
            How many pages were processed out of how many endpoints.

        Raises:
            SpecParseError: If the document cannot be loaded.
            PublishError: If a page is rejected; the message names the endpoint.
            ConnectionError_: If Confluence cannot be reached.
            ConversionCancelled: If *cancel_event* was set mid-run.
        """
        output = get_output()

        if isinstance(source, Spec):
            spec = source
        else:
            output.info(f"Fetching Swagger specification from: {source}")
            spec = load_and_parse(source, timeout=self._timeout)

        output.info(f"Successfully parsed: {spec.info.title} v{spec.info.version}")
        endpoints = extract_endpoints(spec)
        output.info(f"Found {len(endpoints)} endpoints")

        summary = ConversionSummary(api_title=spec.info.title, total=len(endpoints))

        parent_id = self._parent_page_id
        if parent_id:
            output.debug(f"Using configured parent page {parent_id}")
        else:
            parent_id = self._publisher.create_parent_page(spec.info.title)
        if parent_id:
            output.info(f"Parent page ID: {parent_id}")
        summary.parent_page_id = parent_id

        formatter = PageFormatter(spec)
        for index, endpoint in enumerate(endpoints, start=1):
            if cancel_event is not None and cancel_event.is_set():
                raise ConversionCancelled(
                    f"Conversion cancelled after {summary.processed}/{summary.total} pages"
                )

            label = f"{endpoint.method.value.upper()} {endpoint.path}"
            output.progress(f"[{index}/{len(endpoints)}] Processing: {label}")
            content = formatter.format_endpoint_page(endpoint)
            try:
                page_id = self._publisher.create_or_update_page(endpoint.title, content, parent_id)
            except (PublishError, ConnectionError_) as exc:
                raise type(exc)(f"Failed to process {label}: {exc}") from exc

            summary.processed += 1
            if page_id:
                summary.page_ids.append(page_id)

        output.success(f"Summary: {summary.processed}/{summary.total} pages processed successfully")
        return summary
