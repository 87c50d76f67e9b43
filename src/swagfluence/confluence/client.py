"""Publish pages to Confluence, or print them when publishing is not configured.

Two publishers implement the :class:`PageClient` protocol:

- :class:`ConfluenceClient` -- wraps :class:`httpx.Client` and talks to the
  Confluence REST content API with HTTP basic auth. Pages are matched by
  space key and title; an existing page is updated with its version number
  bumped by one, otherwise a new page is created.
- :class:`ConsolePublisher` -- writes each page to stdout and returns an
  empty page ID. Used for ``--dry-run`` and when credentials are missing.

Example::

    config = load_confluence_config()
    with ConfluenceClient(config) as client:
        parent_id = client.create_parent_page("Petstore")
        client.create_or_update_page("List Pets", markup, parent_id)
"""

from __future__ import annotations

from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from swagfluence.confluence.formatter import render_parent_page
from swagfluence.exceptions import ConnectionError_, PublishError
from swagfluence.models import (
    Body,
    ConfluenceConfig,
    Page,
    PageAncestor,
    SearchResponse,
    Space,
    Storage,
    Version,
)
from swagfluence.output import get_output

CONTENT_PATH = "/rest/api/content"


def parent_page_title(api_title: str) -> str:
    """Return the title of the index page for an API."""
    return f"{api_title} - API Documentation"


class PageClient(Protocol):
    """Anything that can publish a page and return its ID."""

    def create_or_update_page(self, title: str, content: str, parent_page_id: str = "") -> str:
        ...

    def create_parent_page(self, api_title: str) -> str:
        ...


class ConfluenceClient:
    """Synchronous client for the Confluence REST content API.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        config: Connection settings. ``base_url`` is the wiki root, e.g.
            ``https://example.atlassian.net/wiki``.
        transport: Optional httpx transport, for tests.
    """

    def __init__(
        self,
        config: ConfluenceConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> ConfluenceClient:
        self._client = httpx.Client(
            base_url=self._config.base_url,
            auth=(self._config.username, self._config.api_token),
            timeout=self._config.timeout,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def create_or_update_page(self, title: str, content: str, parent_page_id: str = "") -> str:
        """Create a page, or update the page with the same title in the space.

        Args:
            title: Page title; also the lookup key within the space.
            content: Page body in storage format.
            parent_page_id: Ancestor page ID, or ``""`` for a top-level page.

        Returns:
            The ID of the created or updated page.

        Raises:
            PublishError: On any unexpected HTTP status or unreadable response.
            ConnectionError_: On network-level failures.
        """
        page = Page(
            title=title,
            space=Space(key=self._config.space_key),
            body=Body(storage=Storage(value=content)),
            ancestors=[PageAncestor(id=parent_page_id)] if parent_page_id else [],
        )

        existing = self.find_page(title)
        if existing is not None:
            current = existing.version.number if existing.version else 0
            page = page.model_copy(update={"id": existing.id, "version": Version(number=current + 1)})
            return self._update_page(page)
        return self._create_page(page)

    def create_parent_page(self, api_title: str) -> str:
        """Create or update the ``"<title> - API Documentation"`` index page."""
        return self.create_or_update_page(
            parent_page_title(api_title), render_parent_page(api_title), ""
        )

    def find_page(self, title: str) -> Optional[Page]:
        """Return the first page in the space with exactly *title*, if any."""
        response = self._send(
            "GET",
            CONTENT_PATH,
            params={"spaceKey": self._config.space_key, "title": title, "expand": "version"},
        )
        self._expect(response, (200,), "search page")
        try:
            results = SearchResponse.model_validate(response.json()).results
        except (ValueError, ValidationError) as exc:
            raise PublishError(f"Failed to decode search response: {exc}") from exc
        return results[0] if results else None

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _create_page(self, page: Page) -> str:
        response = self._send("POST", CONTENT_PATH, json=_payload(page))
        self._expect(response, (200, 201), "create page")
        page_id = _response_id(response)
        get_output().success(f"✓ Created page: {page.title} - {self._config.page_url(page_id)}")
        return page_id

    def _update_page(self, page: Page) -> str:
        response = self._send("PUT", f"{CONTENT_PATH}/{page.id}", json=_payload(page))
        self._expect(response, (200,), "update page")
        get_output().success(f"✓ Updated page: {page.title} - {self._config.page_url(page.id)}")
        return page.id or ""

    def _send(self, method: str, path: str, **kwargs: object) -> httpx.Response:
        assert self._client is not None, "Client not initialised -- use as context manager"
        get_output().debug(f"{method} {self._config.base_url}{path}")
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise ConnectionError_(f"Request to Confluence timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise ConnectionError_(f"Failed to reach Confluence at {self._config.base_url}: {exc}") from exc

    @staticmethod
    def _expect(response: httpx.Response, accepted: tuple[int, ...], action: str) -> None:
        if response.status_code not in accepted:
            raise PublishError(
                f"Failed to {action}: unexpected status {response.status_code}: {response.text}"
            )


class ConsolePublisher:
    """Prints pages to stdout instead of publishing them."""

    def create_or_update_page(self, title: str, content: str, parent_page_id: str = "") -> str:
        get_output().print_data(f"\n=== Page: {title} ===\n{content}\n")
        return ""

    def create_parent_page(self, api_title: str) -> str:
        return self.create_or_update_page(
            parent_page_title(api_title), render_parent_page(api_title), ""
        )


def _payload(page: Page) -> dict:
    return page.model_dump(mode="json", exclude_none=True)


def _response_id(response: httpx.Response) -> str:
    try:
        return Page.model_validate(response.json()).id or ""
    except (ValueError, ValidationError) as exc:
        raise PublishError(f"Failed to decode page response: {exc}") from exc
